"""Mailconf — email account configuration: form validation and command bridge.

Validates account, settings, and connection-test forms and hands the
results to the native command layer.

Basic usage::

    from mailconf import AccountForm, CommandBridge

    bridge = CommandBridge()
    form = AccountForm()
    form.set("name", "Work")
    if not form.validate_field("name"):
        print(form.validation.first_error("name"))

Validation only::

    from mailconf.validation import use_form_validation, required

    form = use_form_validation()
    form.validate({"name": ""}, {"name": [required()]})
    form.is_valid_form  # False
"""

import importlib

__version__ = "0.1.0"
__all__ = [
    "AccountForm",
    "BridgeConfig",
    "CommandBridge",
    "CommandError",
    "ConfigurationError",
    "ConnectionTestForm",
    "FormInvalid",
    "FormValidation",
    "MailconfError",
    "RuleDefinitionError",
    "SettingsForm",
    "use_form_validation",
]

# public name -> defining module
_LAZY_IMPORTS: dict[str, str] = {
    "AccountForm": "mailconf.forms",
    "ConnectionTestForm": "mailconf.forms",
    "SettingsForm": "mailconf.forms",
    "BridgeConfig": "mailconf.config",
    "CommandBridge": "mailconf.bridge",
    "FormValidation": "mailconf.validation",
    "use_form_validation": "mailconf.validation",
    "CommandError": "mailconf.errors",
    "ConfigurationError": "mailconf.errors",
    "FormInvalid": "mailconf.errors",
    "MailconfError": "mailconf.errors",
    "RuleDefinitionError": "mailconf.errors",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import mailconf`` fast (and free of anyio) while providing a
    clean top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)
    return getattr(importlib.import_module(module_name), name)
