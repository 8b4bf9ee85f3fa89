#!/usr/bin/env python3
"""
mbstub CLI - Build Mountebank stub templates from the command line

Commands:
    serve       Start the web form and HTTP API
    generate    Build a stub from flags and print or save it
    parse-url   Split a URL into path and query parameters
    list        List template files
    show        Print a template file
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from .common.url_utils import parse_url
from .server.config import ServerConfig
from .storage.file_store import FileStore
from .stub.generator import StubGenerator
from .stub.models import StubDraft, HTTP_METHODS
from .stub.renderer import render_template, render_entry, extract_stubs, to_json


def _split_pairs(values: Optional[List[str]], separator: str, label: str) -> List[tuple]:
    """Split KEY<sep>VALUE arguments into pairs."""
    pairs = []
    for item in values or []:
        if separator not in item:
            raise ValueError(f"Invalid {label} '{item}' (expected KEY{separator}VALUE)")
        key, value = item.split(separator, 1)
        pairs.append((key.strip(), value.strip()))
    return pairs


def _load_config(args) -> ServerConfig:
    """Build config from --config plus command line overrides."""
    return ServerConfig.load(
        getattr(args, 'config', None),
        stubs_dir=getattr(args, 'stubs_dir', None),
        host=getattr(args, 'host', None),
        port=getattr(args, 'port', None),
        log_level=getattr(args, 'log_level', None)
    )


def _store_from_config(config: ServerConfig) -> FileStore:
    return FileStore(
        config.stubs_dir,
        extension=config.file_extension,
        lock_writes=config.lock_writes
    )


def cmd_serve(args):
    """Start the stub builder server."""
    from .server.app import StubServer

    config = _load_config(args)
    if args.no_ui:
        config.ui_enabled = False
    if args.no_header_match:
        config.match_headers = False

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper()),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    server = StubServer(config=config)
    server.start()


def cmd_generate(args):
    """Generate a stub from command line flags."""
    config = _load_config(args)

    path = args.path
    query_pairs = _split_pairs(args.query, '=', 'query parameter')
    if args.url:
        parsed = parse_url(args.url)
        path = path or parsed.path
        query_pairs = [(p.key, p.value) for p in parsed.query_params] + query_pairs

    if not path:
        raise ValueError("Either --path or --url is required")

    response_body = args.body or ''
    if args.body_file:
        response_body = Path(args.body_file).read_text(encoding='utf-8')

    draft = StubDraft(
        method=args.method,
        path=path,
        status_code=args.status,
        query_params=[{'key': k, 'value': v} for k, v in query_pairs],
        headers=[{'name': k, 'value': v} for k, v in _split_pairs(args.header, ':', 'header')],
        response_body=response_body
    )

    generator = StubGenerator(
        match_headers=not args.no_header_match and config.match_headers,
        include_response_headers=config.include_response_headers
    )
    stub = generator.generate(draft)

    if args.format == 'json':
        output = to_json(stub)
    elif args.format == 'entry':
        output = render_entry(stub)
    else:
        output = render_template(stub)

    if not args.output:
        print(output)
        return

    store = _store_from_config(config)
    filename = store.ensure_extension(args.output)
    if args.append:
        store.append(filename, output)
        print(f"✓ Appended stub to {store.path_for(filename)}")
    else:
        store.save(filename, output)
        print(f"✓ Saved stub to {store.path_for(filename)}")


def cmd_parse_url(args):
    """Print path and query parameters of a URL."""
    parsed = parse_url(args.url)
    print(json.dumps(parsed.to_dict(), indent=2))


def cmd_list(args):
    """List template files in the stubs directory."""
    config = _load_config(args)
    store = _store_from_config(config)

    files = store.list_files()
    if not files:
        print(f"No {config.file_extension} files in {store.directory}")
        return

    for filename in files:
        print(filename)


def cmd_show(args):
    """Print a template file, or just the stubs embedded in it."""
    config = _load_config(args)
    store = _store_from_config(config)
    content = store.read(store.ensure_extension(args.filename))

    if args.stubs:
        print(json.dumps(extract_stubs(content), indent=2))
    else:
        print(content)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog='mbstub',
        description="mbstub - Build Mountebank stub templates from request/response descriptions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Start the web form on port 3000
  %(prog)s serve --port 3000 --stubs-dir ./stubs

  # Print a stub template for a GET endpoint
  %(prog)s generate --method GET --url "api.example.com/users?id=1" --body '{"id": 1}'

  # Append a stub to an existing file
  %(prog)s generate --method POST --path /users --status 201 -o users --append

  # Show the stubs stored in a file
  %(prog)s show users.ejs --stubs
        """
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('-c', '--config', help='YAML config file')
    common.add_argument('-d', '--stubs-dir', help='Stubs directory (default: ./stubs)')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # --- SERVE command ---
    serve_parser = subparsers.add_parser('serve', parents=[common], help='Start the web form and HTTP API')
    serve_parser.add_argument('--host', help='Host to bind (default: 127.0.0.1)')
    serve_parser.add_argument('-p', '--port', type=int, help='Port to bind (default: 3000)')
    serve_parser.add_argument('--log-level', choices=['debug', 'info', 'warning', 'error'],
                              help='Log level (default: info)')
    serve_parser.add_argument('--no-ui', action='store_true', help='Serve the API only')
    serve_parser.add_argument('--no-header-match', action='store_true',
                              help='Leave headers out of generated predicates')

    # --- GENERATE command ---
    generate_parser = subparsers.add_parser('generate', parents=[common], help='Generate a stub')
    generate_parser.add_argument('-m', '--method', choices=HTTP_METHODS, default='PUT',
                                 help='HTTP method (default: PUT)')
    generate_parser.add_argument('--path', help='Request path (e.g., /users)')
    generate_parser.add_argument('-u', '--url', help='URL to take path and query parameters from')
    generate_parser.add_argument('-s', '--status', type=int, default=200, help='Status code (default: 200)')
    generate_parser.add_argument('-q', '--query', nargs='+', help='Query parameters (key=value)')
    generate_parser.add_argument('-H', '--header', nargs='+', help='Headers (Name:value)')
    generate_parser.add_argument('-b', '--body', help='JSON response body')
    generate_parser.add_argument('--body-file', help='File containing the JSON response body')
    generate_parser.add_argument('-f', '--format', choices=['template', 'entry', 'json'], default='template',
                                 help='Output format (default: template)')
    generate_parser.add_argument('-o', '--output', help='Save to this file in the stubs directory')
    generate_parser.add_argument('-a', '--append', action='store_true', help='Append instead of overwrite')
    generate_parser.add_argument('--no-header-match', action='store_true',
                                 help='Leave headers out of the predicate')

    # --- PARSE-URL command ---
    parse_parser = subparsers.add_parser('parse-url', help='Split a URL into path and query parameters')
    parse_parser.add_argument('url', help='URL (scheme optional)')

    # --- LIST command ---
    subparsers.add_parser('list', parents=[common], help='List template files')

    # --- SHOW command ---
    show_parser = subparsers.add_parser('show', parents=[common], help='Print a template file')
    show_parser.add_argument('filename', help='Template filename')
    show_parser.add_argument('--stubs', action='store_true', help='Print only the embedded stub JSON')

    return parser


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    commands = {
        'serve': cmd_serve,
        'generate': cmd_generate,
        'parse-url': cmd_parse_url,
        'list': cmd_list,
        'show': cmd_show,
    }

    handler = commands.get(args.command)
    if handler is None:
        parser.print_help()
        sys.exit(1)

    try:
        handler(args)
    except ValidationError as e:
        for error in e.errors():
            field = '.'.join(str(part) for part in error['loc'])
            print(f"✗ {field}: {error['msg']}", file=sys.stderr)
        sys.exit(1)
    except (OSError, ValueError) as e:
        print(f"✗ {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
