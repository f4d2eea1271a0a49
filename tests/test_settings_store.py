import pytest

from backoffice import models
from backoffice.errors import ValidationError
from backoffice.stores import DEFAULT_SETTINGS, SettingsStore, setting_to_text


def _seed(session, values):
    for key, value in values.items():
        session.add(models.Setting(key=key, value=value))
    session.commit()


def test_bulk_set_overwrites_only_submitted_keys(session):
    _seed(session, {"site_name": "Old", "contact_email": "a@b.com"})
    store = SettingsStore(session)

    store.bulk_set({"site_name": "Acme"})

    assert store.get_all() == {"site_name": "Acme", "contact_email": "a@b.com"}


def test_bulk_set_inserts_new_keys(session):
    store = SettingsStore(session)
    store.bulk_set({"footer_note": "Since 2010", "max_seats": 30, "show_banner": True})

    assert store.get_all() == {"footer_note": "Since 2010", "max_seats": "30", "show_banner": "true"}


def test_bulk_set_is_idempotent(session):
    store = SettingsStore(session)
    updates = {"site_name": "Acme", "hero_title": "Grow"}

    store.bulk_set(updates)
    first = store.get_all()
    store.bulk_set(updates)

    assert store.get_all() == first == updates


def test_bulk_set_rejected_pair_leaves_batch_unapplied(session):
    _seed(session, {"site_name": "Old", "contact_email": "a@b.com"})
    store = SettingsStore(session)

    with pytest.raises(ValidationError):
        store.bulk_set({"site_name": "Acme", "new_key": "x", "address": {"street": "Main"}})

    assert store.get_all() == {"site_name": "Old", "contact_email": "a@b.com"}


@pytest.mark.parametrize("updates", [{"": "x"}, {"  ": "x"}, {"site_name": None}, {"site_name": ["a"]}])
def test_bulk_set_rejects_malformed_input(session, updates):
    with pytest.raises(ValidationError):
        SettingsStore(session).bulk_set(updates)


def test_bulk_set_requires_mapping(session):
    with pytest.raises(ValidationError):
        SettingsStore(session).bulk_set([("site_name", "Acme")])


@pytest.mark.parametrize("value, expected", [
    ("text", "text"),
    (False, "false"),
    (12, "12"),
    (5.0, "5"),
    (2.5, "2.5"),
])
def test_setting_to_text(value, expected):
    assert setting_to_text("k", value) == expected


def test_ensure_defaults_on_empty_store(session):
    store = SettingsStore(session)

    assert store.ensure_defaults() == 6
    assert store.get_all() == DEFAULT_SETTINGS
    # second run sees a populated store
    assert store.ensure_defaults() == 0


def test_ensure_defaults_skips_partially_populated_store(session):
    _seed(session, {"site_name": "Acme"})
    store = SettingsStore(session)

    assert store.ensure_defaults() == 0
    assert store.get_all() == {"site_name": "Acme"}


def test_ensure_defaults_per_key_fills_missing_keys_only(session):
    _seed(session, {"site_name": "Acme", "custom": "1"})
    store = SettingsStore(session)

    assert store.ensure_defaults(per_key=True) == 5

    expected = dict(DEFAULT_SETTINGS, site_name="Acme", custom="1")
    assert store.get_all() == expected
