import pytest

from dtogen.core.naming import default_output_file, default_output_name, pascal_to_snake


@pytest.mark.parametrize(
    "name, expected",
    [
        ("User", "user"),
        ("UserDTO", "user_dto"),
        ("OrderItemDTO", "order_item_dto"),
        ("HTTPServer", "httpserver"),
        ("user2Profile", "user2profile"),
        ("already_snake", "already_snake"),
    ],
)
def test_pascal_to_snake(name, expected):
    assert pascal_to_snake(name) == expected


def test_defaults():
    assert default_output_name("User") == "UserDTO"
    assert default_output_file("UserDTO") == "user_dto.py"
