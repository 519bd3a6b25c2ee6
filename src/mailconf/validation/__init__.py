"""Form validation — named rules, per-field error state.

Usage::

    from mailconf.validation import use_form_validation, required, is_number

    form = use_form_validation()

    def on_blur(values: dict[str, str]) -> None:
        form.validate(values, {
            "name": [required()],
            "port": [required(), is_number()],
        })

    form.errors         # {"port": {"is-number": "Field is not a number"}}
    form.is_valid_form  # False

Each call updates only the fields it names, so a blur handler can
re-validate one input without clearing the messages of the others.
"""

from mailconf.validation.engine import (
    ErrorState,
    FormInput,
    FormValidation,
    ValidationSpec,
)
from mailconf.validation.rules import (
    RULES,
    Check,
    FieldValue,
    Rule,
    RuleResponse,
    email,
    is_number,
    matches,
    max_length,
    min_length,
    one_of,
    port,
    port_number,
    required,
    required_if,
)

__all__ = [
    "RULES",
    "Check",
    "ErrorState",
    "FieldValue",
    "FormInput",
    "FormValidation",
    "Rule",
    "RuleResponse",
    "ValidationSpec",
    "email",
    "is_number",
    "matches",
    "max_length",
    "min_length",
    "one_of",
    "port",
    "port_number",
    "required",
    "required_if",
    "use_form_validation",
]


def use_form_validation() -> FormValidation:
    """Create the error state for a new form instance.

    One per form. Never share the result between forms that are open at
    the same time.
    """
    return FormValidation()
