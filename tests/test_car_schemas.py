"""
Tests for car listing input validation: every offending field is reported at once.
"""

import pytest

from app.core.config import settings
from app.schemas import parse_car_create, parse_car_update
from app.utils.exception_utils import ValidationException


VALID = {
    "name": " X5 ",
    "brand": "BMW",
    "type": "SUV",
    "price": "15000",
    "description": "Spacious family SUV",
}


class TestCarCreateValidation:
    def test_coerces_form_strings(self):
        car_in = parse_car_create(
            {**VALID, "available": "false", "featured": "true", "specs": {"seats": "7"}}
        )
        assert car_in.name == "X5"
        assert car_in.price == 15000
        assert car_in.available is False
        assert car_in.featured is True
        assert car_in.specs.seats == 7
        assert car_in.rating == 5.0

    def test_missing_fields_are_aggregated(self):
        with pytest.raises(ValidationException) as exc:
            parse_car_create({})
        assert set(exc.value.field_names) == {"name", "brand", "type", "price", "description"}

    def test_invalid_values_are_aggregated(self):
        with pytest.raises(ValidationException) as exc:
            parse_car_create(
                {
                    **VALID,
                    "name": "   ",
                    "type": "Spaceship",
                    "price": "-5",
                    "specs": {"seats": 0, "fuel": "Coal"},
                }
            )
        assert set(exc.value.field_names) == {
            "name",
            "type",
            "price",
            "specs.seats",
            "specs.fuel",
        }

    def test_description_length_limit(self):
        with pytest.raises(ValidationException) as exc:
            parse_car_create({**VALID, "description": "x" * 1001})
        assert exc.value.field_names == ["description"]

    def test_price_multiple_of_100_policy(self, monkeypatch):
        monkeypatch.setattr(settings, "ENFORCE_PRICE_MULTIPLE_OF_100", True)
        with pytest.raises(ValidationException) as exc:
            parse_car_create({**VALID, "price": "15050"})
        assert exc.value.field_names == ["price"]
        assert parse_car_create(VALID).price == 15000


class TestCarUpdateValidation:
    def test_field_patch_holds_only_supplied_fields(self):
        car_in = parse_car_update({"price": "12000", "images_to_delete": ["a"]})
        assert car_in.field_patch() == {"price": 12000}
        assert car_in.images_to_delete == ["a"]

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationException) as exc:
            parse_car_update({"name": " ", "rating": "7"})
        assert set(exc.value.field_names) == {"name", "rating"}
