from backoffice.crud.settings import set_setting
from backoffice.schemas.order_protection import OrderProtectionSettings
from backoffice.services.order_protection import (
    SETTINGS_PREFIX,
    load_order_protection,
    parse_order_protection,
    save_order_protection,
    serialize_order_protection,
)

def test_defaults_when_nothing_stored():
    settings = parse_order_protection({})

    assert settings == OrderProtectionSettings()
    assert settings.block_pending_orders is True
    assert settings.block_returned_orders is True
    assert settings.block_shipped_orders is False
    assert settings.max_phone_changes == 3
    assert settings.order_cooldown_hours == 12
    assert settings.min_success_rate == 50

def test_default_on_flags_only_disabled_by_false():
    settings = parse_order_protection({
        "block_pending_orders": "false",
        "block_returned_orders": "garbage",
        "input_blocking_enabled": "yes",
        "time_blocking_enabled": "true",
    })

    assert settings.block_pending_orders is False
    assert settings.block_returned_orders is True
    assert settings.input_blocking_enabled is False
    assert settings.time_blocking_enabled is True

def test_invalid_numbers_fall_back_to_defaults():
    settings = parse_order_protection({
        "max_phone_changes": "abc",
        "min_success_rate": "250",
        "return_rate_block_threshold": " 70 ",
        "max_pending_orders": "0",
    })

    assert settings.max_phone_changes == 3
    assert settings.min_success_rate == 50
    assert settings.return_rate_block_threshold == 70
    # Сохраненный 0 - допустимое значение
    assert settings.max_pending_orders == 0

def test_serialize_uses_prefixed_string_values():
    serialized = serialize_order_protection(OrderProtectionSettings(time_blocking_enabled=True, order_cooldown_hours=6))

    assert len(serialized) == len(OrderProtectionSettings.model_fields)
    assert serialized[f"{SETTINGS_PREFIX}time_blocking_enabled"] == "true"
    assert serialized[f"{SETTINGS_PREFIX}block_shipped_orders"] == "false"
    assert serialized[f"{SETTINGS_PREFIX}order_cooldown_hours"] == "6"

def test_save_and_load(db):
    set_setting(db, "botbhai_api_key", "unrelated")
    saved = OrderProtectionSettings(
        history_blocking_enabled=True, min_success_rate=80, block_pending_orders=False
    )

    save_order_protection(db, saved)
    # Повторное сохранение обновляет существующие строки
    save_order_protection(db, saved)

    assert load_order_protection(db) == saved

def test_endpoint_roundtrip(client):
    assert client.get("/api/v1/order-protection/").json() == OrderProtectionSettings().dict()

    body = OrderProtectionSettings(status_blocking_enabled=True, max_pending_orders=1).dict()
    assert client.put("/api/v1/order-protection/", json=body).status_code == 200

    assert client.get("/api/v1/order-protection/").json() == body

def test_endpoint_rejects_out_of_range(client):
    response = client.put("/api/v1/order-protection/", json={"min_success_rate": 101})
    assert response.status_code == 422
