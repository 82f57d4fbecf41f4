"""Tests for the docsession exception hierarchy."""

from docsession.kernel.exceptions import (
    BusinessException,
    ConfigurationException,
    DocSessionException,
    DocumentStoreException,
    DuplicateDocumentException,
    InfrastructureException,
    InvalidRequestException,
    InvalidSessionKeyException,
    SessionNotStartedException,
    ValidationException,
)


class TestDocSessionException:
    def test_basic_creation(self):
        exc = DocSessionException("something went wrong")
        assert str(exc) == "something went wrong"
        assert exc.code is None
        assert exc.context == {}

    def test_with_error_code_and_context(self):
        exc = DocSessionException("bad key", code="INVALID_KEY", context={"key": "$where"})
        assert exc.code == "INVALID_KEY"
        assert exc.context["key"] == "$where"

    def test_context_defaults_to_empty_dict(self):
        exc = DocSessionException("test")
        exc.context["key"] = "value"
        assert DocSessionException("test2").context == {}


class TestExceptionHierarchy:
    def test_configuration_is_docsession(self):
        assert issubclass(ConfigurationException, DocSessionException)

    def test_invalid_key_is_validation(self):
        assert issubclass(InvalidSessionKeyException, ValidationException)
        assert issubclass(ValidationException, BusinessException)

    def test_not_started_is_invalid_request(self):
        assert issubclass(SessionNotStartedException, InvalidRequestException)
        assert issubclass(InvalidRequestException, BusinessException)

    def test_store_errors_are_infrastructure(self):
        assert issubclass(DuplicateDocumentException, DocumentStoreException)
        assert issubclass(DocumentStoreException, InfrastructureException)

    def test_catch_all_docsession_exceptions(self):
        exceptions = [
            ConfigurationException("Could not initialize the session."),
            InvalidSessionKeyException("bad key"),
            SessionNotStartedException("no id"),
            DuplicateDocumentException("exists"),
        ]
        for exc in exceptions:
            try:
                raise exc
            except DocSessionException as caught:
                assert caught is exc
