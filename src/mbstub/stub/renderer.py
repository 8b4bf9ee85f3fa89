"""
mbstub Template Renderer

Serializes stub records into the EJS template files Mountebank loads with
--configfile, and extracts stub payloads back out of such files.

A rendered file looks like:

    <%
    const stub = {
      "predicates": [...],
      "responses": [...]
    };
    %>

    <%= JSON.stringify(stub, null, 2) %>
"""

import json
from typing import List, Dict, Any

from ..errors import InvalidJSON


STUB_DIRECTIVE = 'const stub = '

EJS_TEMPLATE = """<%
const stub = {stub_json};
%>

<%= JSON.stringify(stub, null, 2) %>"""


def to_json(stub: Dict[str, Any]) -> str:
    """Pretty-print a stub with 2-space indentation."""
    return json.dumps(stub, indent=2, ensure_ascii=False)


def render_template(stub: Dict[str, Any]) -> str:
    """
    Render a stub as an EJS template file.

    Args:
        stub: Stub record from StubGenerator

    Returns:
        Template text assigning the stub to a variable and emitting it
    """
    return EJS_TEMPLATE.format(stub_json=to_json(stub))


def render_entry(stub: Dict[str, Any]) -> str:
    """
    Render a stub as an entry for an existing "stubs" array.

    The trailing comma lets several entries be pasted one after another.
    """
    return f"{to_json(stub)},"


def extract_stubs(content: str) -> List[Dict[str, Any]]:
    """
    Extract every stub embedded in template text.

    A file built with append holds one directive per appended stub, so the
    result can contain more than one record.

    Args:
        content: Template file content

    Returns:
        Stub records in file order

    Raises:
        InvalidJSON: If a directive's payload is not valid JSON
    """
    decoder = json.JSONDecoder()
    stubs = []
    position = content.find(STUB_DIRECTIVE)

    while position != -1:
        start = position + len(STUB_DIRECTIVE)
        try:
            stub, end = decoder.raw_decode(content, start)
        except json.JSONDecodeError as e:
            raise InvalidJSON(f"Invalid stub payload at offset {start}: {e}") from e
        stubs.append(stub)
        position = content.find(STUB_DIRECTIVE, end)

    return stubs
