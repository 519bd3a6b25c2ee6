"""Per-form validation state.

``FormValidation`` owns a form's error state: field name to failing rule
name to message. It is the only mutable piece of the engine and the single
thing a view reads to render messages and gate submission.

Invariants kept after every ``validate()`` call:

- A field key is present iff at least one of its rules currently fails.
  Empty per-field maps are pruned immediately.
- Fields not named in the call are left exactly as they were.
- ``is_valid_form`` is computed from the error state on read; it is never
  stored, so it cannot drift.

A new form starts with an empty error state and therefore reports valid
before any field has been touched. Callers that need "untouched" vs
"validated and clean" must validate the whole form before submitting,
which is what ``mailconf.forms`` does.

Single-threaded by contract: one instance per open form, driven from UI
event handlers that run one at a time.
"""

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import TypeAlias

from mailconf.errors import RuleDefinitionError
from mailconf.validation.rules import RULES, FieldValue, Rule

logger = logging.getLogger("mailconf.validation")

# field -> rule name -> message
ErrorState: TypeAlias = dict[str, dict[str, str]]
ValidationSpec: TypeAlias = Mapping[str, Sequence[Rule]]
FormInput: TypeAlias = Mapping[str, FieldValue]
Listener: TypeAlias = Callable[["FormValidation"], None]


class FormValidation:
    """Error state for one form instance.

    Usage::

        form = FormValidation()
        form.validate({"name": ""}, {"name": [required()]})
        form.errors        # {"name": {"required": "Field is required"}}
        form.is_valid_form # False
    """

    __slots__ = ("_errors", "_listeners")

    # Available rule factories, keyed by rule name
    rules = RULES

    def __init__(self) -> None:
        self._errors: ErrorState = {}
        self._listeners: list[Listener] = []

    @property
    def errors(self) -> ErrorState:
        """Failing rules grouped by field.

        Example: ``{"name": {"required": "Field is required"}}``.
        Owned by the form. Read it, do not mutate it.
        """
        return self._errors

    @property
    def is_valid_form(self) -> bool:
        """True when no field has a failing rule."""
        return not self._errors

    def validate(self, data: FormInput, spec: ValidationSpec) -> None:
        """Run every rule in *spec* against *data* and update the error state.

        Only fields named in *spec* are touched. Missing values in *data*
        are checked as ``None``. A check that raises propagates to the
        caller unchanged.
        """
        before = self._snapshot()

        for field_name, rules in spec.items():
            value = data.get(field_name)
            self._validate_field(field_name, value, rules)

        if self._snapshot() != before:
            logger.debug(
                "Error state changed after validating %d field(s); form valid: %s",
                len(spec),
                self.is_valid_form,
            )
            self._notify()

    def _validate_field(
        self,
        field_name: str,
        value: FieldValue,
        rules: Sequence[Rule],
    ) -> None:
        seen: set[str] = set()
        for rule_name, _ in rules:
            if rule_name in seen:
                msg = f"Duplicate rule {rule_name!r} for field {field_name!r}"
                raise RuleDefinitionError(msg)
            seen.add(rule_name)

        # Work on a copy so a raising check leaves the stored state intact
        field_errors = dict(self._errors.get(field_name, {}))

        for rule_name, check in rules:
            response = check(value)
            if (
                not isinstance(response, tuple)
                or len(response) != 2
                or not isinstance(response[0], bool)
                or not isinstance(response[1], str)
            ):
                msg = (
                    f"Rule {rule_name!r} for field {field_name!r} must return "
                    f"(bool, str), got {response!r}"
                )
                raise RuleDefinitionError(msg)

            is_valid, message = response
            if is_valid:
                field_errors.pop(rule_name, None)
            else:
                field_errors[rule_name] = message

        if field_errors:
            self._errors[field_name] = field_errors
        else:
            self._errors.pop(field_name, None)

    # -- Reading helpers ------------------------------------------------------

    def field_errors(self, field_name: str) -> dict[str, str]:
        """Copy of the failing rules for *field_name* (empty if none)."""
        return dict(self._errors.get(field_name, {}))

    def first_error(self, field_name: str) -> str | None:
        """Message of the earliest recorded failing rule, or ``None``."""
        messages = self._errors.get(field_name)
        if not messages:
            return None
        return next(iter(messages.values()))

    # -- Observation ----------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* with this form whenever the error state changes.

        Listeners run synchronously before ``validate()`` returns. Returns
        a function that removes the listener; calling it twice is harmless.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def _snapshot(self) -> dict[str, dict[str, str]]:
        return {field: dict(messages) for field, messages in self._errors.items()}

    def __repr__(self) -> str:
        return f"FormValidation(errors={self._errors!r})"
