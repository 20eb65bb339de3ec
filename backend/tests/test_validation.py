import pytest

from stocktrail.core.errors import ValidationError
from stocktrail.services.validation import (
    REQUIRED_FIELDS,
    normalize_product_data,
    parse_stock,
    validate_product_data,
)


def valid_data(**overrides):
    data = {
        "name": "Rice",
        "unit": "kg",
        "category": "food",
        "brand": "abc",
        "status": "active",
        "stock": 10,
    }
    data.update(overrides)
    return data


class TestRequiredFields:
    @pytest.mark.parametrize("field", REQUIRED_FIELDS)
    def test_missing_field_is_reported_by_name(self, field):
        data = valid_data()
        del data[field]

        with pytest.raises(ValidationError) as exc:
            validate_product_data(data)

        assert exc.value.message == f"Product field '{field}' is required."
        assert exc.value.status_code == 400

    @pytest.mark.parametrize("blank", ["", "   ", None])
    def test_blank_name_is_missing(self, blank):
        with pytest.raises(ValidationError, match="Product field 'name' is required."):
            validate_product_data(valid_data(name=blank))

    def test_first_missing_field_wins(self):
        with pytest.raises(ValidationError, match="'unit'"):
            validate_product_data(valid_data(unit="", brand=""))

    def test_required_fields_checked_before_stock(self):
        with pytest.raises(ValidationError, match="'status'"):
            validate_product_data(valid_data(status=None, stock=-5))

    def test_valid_data_passes(self):
        assert validate_product_data(valid_data()) is None


class TestStock:
    @pytest.mark.parametrize(
        "value",
        [-1, "-3", "abc", None, "", "  ", True, 2.5, "nan", "inf", 2**31, "99999999999999999999", "1e30"],
    )
    def test_rejected(self, value):
        with pytest.raises(ValidationError) as exc:
            validate_product_data(valid_data(stock=value))

        assert exc.value.message == "Stock must be a non-negative number."

    @pytest.mark.parametrize(
        "value, expected",
        [(0, 0), (20, 20), ("20", 20), (" 7 ", 7), (12.0, 12), ("3.0", 3), (2**31 - 1, 2**31 - 1)],
    )
    def test_accepted_and_parsed(self, value, expected):
        assert parse_stock(value) == expected
        assert isinstance(parse_stock(value), int)


class TestNormalize:
    def test_strips_strings_and_converts_stock(self):
        clean = normalize_product_data(
            valid_data(name="  Rice ", unit=" kg", stock="15", image="  ")
        )

        assert clean == {
            "name": "Rice",
            "unit": "kg",
            "category": "food",
            "brand": "abc",
            "status": "active",
            "stock": 15,
            "image": None,
        }

    def test_keeps_image_url(self):
        clean = normalize_product_data(valid_data(image=" https://img.example.com/rice.png "))
        assert clean["image"] == "https://img.example.com/rice.png"

    def test_ignores_unknown_keys(self):
        clean = normalize_product_data(valid_data(id="4", createdat="2025-01-01"))
        assert "id" not in clean
        assert "createdat" not in clean
