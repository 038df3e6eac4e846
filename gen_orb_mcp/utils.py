"""
Naming utilities for gen-orb-mcp.
"""

_SEPARATORS = {"-", "_", " "}


def to_snake_case(text: str) -> str:
    """Convert kebab-case, camelCase, PascalCase or space-separated text to snake_case.

    Separators become underscores and a lowercase-to-uppercase transition
    starts a new word. A run of capitals is kept as one word.

    Examples:
        "my-orb" -> "my_orb"
        "MyOrb" -> "my_orb"
        "myOrb" -> "my_orb"
        "my orb" -> "my_orb"
        "HTTPServer" -> "httpserver"

    Args:
        text: The text to convert

    Returns:
        snake_case string
    """
    result: list[str] = []
    prev_is_upper = False

    for i, char in enumerate(text):
        if char in _SEPARATORS:
            result.append("_")
            prev_is_upper = False
        elif char.isupper():
            if i > 0 and not prev_is_upper and result and result[-1] != "_":
                result.append("_")
            result.append(char.lower())
            prev_is_upper = True
        else:
            result.append(char)
            prev_is_upper = False

    return "".join(result)


def to_pascal_case(text: str) -> str:
    """Convert kebab-case, snake_case, camelCase or space-separated text to PascalCase.

    Examples:
        "my-orb" -> "MyOrb"
        "my_orb" -> "MyOrb"
        "my orb" -> "MyOrb"
        "myOrb" -> "MyOrb"

    Args:
        text: The text to convert

    Returns:
        PascalCase string
    """
    result: list[str] = []
    capitalize_next = True

    for char in text:
        if char in _SEPARATORS:
            capitalize_next = True
        elif capitalize_next:
            result.append(char.upper())
            capitalize_next = False
        else:
            result.append(char)

    return "".join(result)
