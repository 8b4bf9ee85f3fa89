"""
Tests for mbstub form models

Tests validation of StubDraft / StubFormData and StoredFile serialization.
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from mbstub.stub.models import StubDraft, StubFormData, StoredFile


class TestStubDraft:
    """Test StubDraft validation."""

    def test_camel_case_fields(self):
        """Test parsing the JSON field names used by the form."""
        draft = StubDraft.model_validate({
            'method': 'POST',
            'path': '/users',
            'statusCode': 201,
            'queryParams': [{'key': 'a', 'value': '1'}],
            'headers': [{'name': 'Accept', 'value': '*/*'}],
            'responseBody': '{}'
        })

        assert draft.status_code == 201
        assert draft.query_params[0].key == 'a'
        assert draft.headers[0].name == 'Accept'
        assert draft.response_body == '{}'

    def test_snake_case_fields(self):
        """Test constructing with attribute names."""
        draft = StubDraft(path='/x', status_code=200)

        assert draft.status_code == 200
        assert draft.method == 'PUT'
        assert draft.query_params == []
        assert draft.response_body == ''

    @pytest.mark.parametrize('status', [99, 600, -1])
    def test_status_out_of_range(self, status):
        """Test that status codes outside 100-599 are rejected."""
        with pytest.raises(ValidationError):
            StubDraft.model_validate({'path': '/x', 'statusCode': status})

    @pytest.mark.parametrize('status', [100, 599])
    def test_status_bounds_accepted(self, status):
        """Test that the range bounds are valid."""
        draft = StubDraft.model_validate({'path': '/x', 'statusCode': status})

        assert draft.status_code == status

    def test_empty_path_rejected(self):
        """Test that path must be non-empty."""
        with pytest.raises(ValidationError):
            StubDraft.model_validate({'path': '', 'statusCode': 200})

    def test_unknown_method_rejected(self):
        """Test that methods outside the supported set are rejected."""
        with pytest.raises(ValidationError):
            StubDraft.model_validate({'method': 'TRACE', 'path': '/x', 'statusCode': 200})

    def test_missing_status_rejected(self):
        """Test that statusCode is required."""
        with pytest.raises(ValidationError):
            StubDraft.model_validate({'path': '/x'})


class TestStubFormData:
    """Test StubFormData validation."""

    def test_defaults(self):
        """Test that mode defaults to new."""
        data = StubFormData.model_validate({'path': '/x', 'statusCode': 200, 'filename': 'a'})

        assert data.mode == 'new'
        assert data.filename == 'a'

    def test_filename_required(self):
        """Test that filename must be non-empty."""
        with pytest.raises(ValidationError):
            StubFormData.model_validate({'path': '/x', 'statusCode': 200, 'filename': ''})

    def test_invalid_mode(self):
        """Test that only new/append modes are accepted."""
        with pytest.raises(ValidationError):
            StubFormData.model_validate({
                'path': '/x', 'statusCode': 200, 'filename': 'a', 'mode': 'merge'
            })


class TestStoredFile:
    """Test StoredFile dataclass."""

    def test_to_dict(self):
        """Test converting a record to the API shape."""
        created = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        record = StoredFile(id=1, filename='a.ejs', content='X', created_at=created)

        assert record.to_dict() == {
            'id': 1,
            'filename': 'a.ejs',
            'content': 'X',
            'createdAt': '2024-01-02T03:04:05+00:00'
        }

    def test_default_timestamp(self):
        """Test that created_at defaults to now (UTC)."""
        record = StoredFile(id=1, filename='a.ejs', content='X')

        assert record.created_at.tzinfo is not None


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
