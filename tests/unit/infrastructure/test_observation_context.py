"""Unit tests for ObservationContext."""

from infrastructure.observability import ObservationContext


class TestObservationContext:
    """Tests for observation context metadata."""

    def test_empty_context_has_no_metadata(self):
        """Unset fields are left out."""
        assert ObservationContext().as_dict() == {}

    def test_as_dict_includes_set_fields_and_extra(self):
        """Set fields and extra metadata are merged."""
        context = ObservationContext(request_id="r1", extra={"dry_run": True})

        assert context.as_dict() == {"request_id": "r1", "dry_run": True}

    def test_with_extra_does_not_mutate(self):
        """Derived contexts leave the original untouched."""
        base = ObservationContext(backend="fake")

        derived = base.with_extra(attempt=1).with_resource("vault.prod")

        assert base.as_dict() == {"backend": "fake"}
        assert derived.as_dict() == {
            "backend": "fake",
            "resource": "vault.prod",
            "attempt": 1,
        }
