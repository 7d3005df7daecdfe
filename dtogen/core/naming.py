"""
Naming helpers for generated files and template filters.
"""

import re


def pascal_to_snake(name: str) -> str:
    """
    Convert a PascalCase type name to a snake_case file stem.

    An underscore is inserted only where a lowercase letter is followed
    by an uppercase one, so acronyms stay together: ``UserDTO`` becomes
    ``user_dto`` and ``HTTPServer`` becomes ``httpserver``.
    """
    out = []
    for i, ch in enumerate(name):
        if ch.isupper():
            if i > 0 and name[i - 1].islower():
                out.append("_")
            out.append(ch.lower())
        else:
            out.append(ch)
    return "".join(out)


def default_output_name(type_name: str) -> str:
    return f"{type_name}DTO"


def default_output_file(output_name: str) -> str:
    return pascal_to_snake(output_name) + ".py"


def to_snake_case(value: str) -> str:
    """Convert string to snake_case."""
    s1 = re.sub("([a-z0-9])([A-Z])", r"\1_\2", str(value))
    s2 = re.sub(r"[-\s]+", "_", s1)
    return s2.lower()


def to_camel_case(value: str) -> str:
    """Convert string to camelCase."""
    parts = to_snake_case(value).split("_")
    if not parts:
        return str(value)
    return parts[0].lower() + "".join(p.capitalize() for p in parts[1:])


def to_pascal_case(value: str) -> str:
    """Convert string to PascalCase."""
    parts = to_snake_case(value).split("_")
    return "".join(p.capitalize() for p in parts if p)
