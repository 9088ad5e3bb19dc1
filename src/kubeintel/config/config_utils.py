import os
import re

_PLACEHOLDER = re.compile(r"\$\{([^}]+)\}")


def substitute_env_vars(text: str) -> str:
    """
    Substitute environment variable placeholders in text.

    Supports formats:
    - ${VAR_NAME} - required variable (raises error if missing)
    - ${VAR_NAME:-default} - optional with default value
    - ${VAR_NAME:?error_message} - required with custom error message
    """

    def replacer(match: re.Match[str]) -> str:
        expr = match.group(1)

        if ":-" in expr:
            name, default = expr.split(":-", 1)
            return os.getenv(name, default)

        if ":?" in expr:
            name, error_msg = expr.split(":?", 1)
            value = os.getenv(name)
            if value is None:
                raise ValueError(f"Required environment variable {name}: {error_msg}")
            return value

        value = os.getenv(expr)
        if value is None:
            raise ValueError(f"Required environment variable {expr} not set")
        return value

    return _PLACEHOLDER.sub(replacer, text)
