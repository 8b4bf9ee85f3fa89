"""
mbstub Stub Generator

Builds a Mountebank stub (one predicate, one response) from form data.

Output shape:
    {
      "predicates": [{"equals": {"method", "path", "query", "headers"?}}],
      "responses": [{"is": {"statusCode", "headers"?, "body"}}]
    }
"""

from typing import Dict, Any, Optional

from .models import StubDraft
from ..common.utils import parse_json_body, fold_pairs


DEFAULT_RESPONSE_HEADERS = {'Content-Type': 'application/json'}


class StubGenerator:
    """
    Maps validated form data to a Mountebank stub record.

    Generation is a pure function of the input; the generator holds only
    the options controlling which headers end up in the stub.

    Example:
        generator = StubGenerator()
        stub = generator.generate(StubDraft(path='/ping', statusCode=200))

        # Predicate without header equality, response without headers
        generator = StubGenerator(match_headers=False, include_response_headers=False)
    """

    def __init__(
        self,
        match_headers: bool = True,
        include_response_headers: bool = True,
        default_response_headers: Optional[Dict[str, str]] = None
    ):
        """
        Initialize stub generator.

        Args:
            match_headers: Add the form headers to the predicate's equals block
            include_response_headers: Add headers (defaults + form headers) to the response
            default_response_headers: Headers every response starts from
        """
        self.match_headers = match_headers
        self.include_response_headers = include_response_headers
        if default_response_headers is None:
            default_response_headers = DEFAULT_RESPONSE_HEADERS
        self.default_response_headers = dict(default_response_headers)

    def generate(self, draft: StubDraft) -> Dict[str, Any]:
        """
        Generate a stub record.

        Args:
            draft: Validated form data

        Returns:
            Stub dict ready for JSON serialization

        Raises:
            InvalidJSON: If the response body is not blank and not valid JSON
        """
        query = fold_pairs((p.key, p.value) for p in draft.query_params)
        headers = fold_pairs((h.name, h.value) for h in draft.headers)
        body = parse_json_body(draft.response_body)

        return {
            'predicates': [self._build_predicate(draft, query, headers)],
            'responses': [self._build_response(draft, headers, body)]
        }

    def _build_predicate(
        self,
        draft: StubDraft,
        query: Dict[str, str],
        headers: Dict[str, str]
    ) -> Dict[str, Any]:
        """Build the equality predicate."""
        equals: Dict[str, Any] = {
            'method': draft.method,
            'path': draft.path,
            'query': query
        }

        if self.match_headers and headers:
            equals['headers'] = headers

        return {'equals': equals}

    def _build_response(
        self,
        draft: StubDraft,
        headers: Dict[str, str],
        body: Any
    ) -> Dict[str, Any]:
        """Build the "is" response."""
        response: Dict[str, Any] = {'statusCode': draft.status_code}

        if self.include_response_headers:
            response['headers'] = {**self.default_response_headers, **headers}

        response['body'] = body
        return {'is': response}


_default_generator = StubGenerator()


def generate_stub(draft: StubDraft) -> Dict[str, Any]:
    """Generate a stub with the default options (header matching on)."""
    return _default_generator.generate(draft)
