# Tests for the Location Resolver
# Covers: path computation, account-name validation, idempotent creation,
#         strict existence checks, enumeration, directory rename

import os
from pathlib import Path

import pytest

from citadel_strongbox.core.config import StrongboxSettings
from citadel_strongbox.core.exceptions import (
    InvalidInputError,
    VaultIOError,
    VaultNotFoundError,
)
from citadel_strongbox.vault.locations import (
    DATA_FILE,
    RECIPIENT_FILE,
    VAULT_ONLY,
    Locations,
    rename_directory,
)

VAULT_NAME = "test_vault"
ACCOUNT_NAME = "test_account"


@pytest.fixture
def vault_name(tmp_path):
    return str(tmp_path / VAULT_NAME)


# ── Construction ────────────────────────────────────────────────────


class TestConstruction:
    def test_paths(self, vault_name):
        locations = Locations(vault_name, ACCOUNT_NAME)
        assert locations.vault_location == Path(vault_name)
        assert locations.recipient_location == Path(vault_name) / RECIPIENT_FILE
        assert locations.account_location == Path(vault_name) / ACCOUNT_NAME
        assert locations.data_location == Path(vault_name) / ACCOUNT_NAME / DATA_FILE

    def test_no_io_at_construction(self, vault_name):
        Locations(vault_name, ACCOUNT_NAME)
        assert not os.path.exists(vault_name)

    def test_sentinel_account_allowed(self, vault_name):
        locations = Locations(vault_name, VAULT_ONLY)
        assert locations.account_name == "null"

    def test_empty_account_name(self, vault_name):
        with pytest.raises(InvalidInputError):
            Locations(vault_name, "")

    def test_invalid_input_is_value_error(self, vault_name):
        with pytest.raises(ValueError):
            Locations(vault_name, "")

    @pytest.mark.parametrize("name", [".", "..", "a/b", "../escape", "bad\x00name", RECIPIENT_FILE])
    def test_rejected_account_names(self, vault_name, name):
        with pytest.raises(InvalidInputError):
            Locations(vault_name, name)

    def test_unicode_account_name(self, vault_name):
        locations = Locations(vault_name, "почта")
        assert locations.account_location.name == "почта"

    def test_empty_vault_name(self):
        with pytest.raises(InvalidInputError):
            Locations("", ACCOUNT_NAME)

    @pytest.mark.parametrize("name", [Path(""), Path(".")])
    def test_empty_vault_path(self, name):
        with pytest.raises(InvalidInputError):
            Locations(name, ACCOUNT_NAME)

    def test_relative_vault_under_home(self, tmp_path):
        settings = StrongboxSettings(vault_home=tmp_path / "home")
        locations = Locations("personal", ACCOUNT_NAME, settings=settings)
        assert locations.vault_location == tmp_path / "home" / "personal"

    def test_absolute_vault_ignores_home(self, tmp_path, vault_name):
        settings = StrongboxSettings(vault_home=tmp_path / "home")
        locations = Locations(vault_name, ACCOUNT_NAME, settings=settings)
        assert locations.vault_location == Path(vault_name)

    def test_for_account(self, vault_name):
        locations = Locations(vault_name, ACCOUNT_NAME)
        other = locations.for_account("other")
        assert other.vault_location == locations.vault_location
        assert other.account_location == Path(vault_name) / "other"


# ── Creation ────────────────────────────────────────────────────────


class TestInitializeVault:
    def test_initialize_vault(self, vault_name):
        locations = Locations(vault_name, VAULT_ONLY)
        locations.initialize_vault()
        assert locations.vault_location.is_dir()
        assert locations.recipient_location.is_file()
        assert locations.recipient_location.read_text() == ""

    def test_initialize_is_idempotent(self, vault_name):
        locations = Locations(vault_name, VAULT_ONLY)
        locations.initialize_vault()
        locations.recipient_location.write_text("strongbox-recipient-abc")
        locations.initialize_vault()
        # Existing recipient is left untouched
        assert locations.recipient_location.read_text() == "strongbox-recipient-abc"

    def test_initialize_over_file_fails(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        with pytest.raises(VaultIOError):
            Locations(str(blocker), VAULT_ONLY).initialize_vault()


class TestCreateAccountDirectory:
    def test_create(self, vault_name):
        locations = Locations(vault_name, ACCOUNT_NAME)
        locations.create_account_directory()
        assert locations.account_location.is_dir()

    def test_duplicate_creation_succeeds(self, vault_name):
        locations = Locations(vault_name, ACCOUNT_NAME)
        locations.initialize_vault()
        locations.create_account_directory()
        locations.create_account_directory()
        assert locations.account_location.is_dir()
        assert [p.name for p in locations.vault_location.iterdir() if p.is_dir()] == [ACCOUNT_NAME]

    def test_create_over_file_fails(self, vault_name):
        locations = Locations(vault_name, ACCOUNT_NAME)
        locations.initialize_vault()
        locations.account_location.write_text("squatter")
        with pytest.raises(VaultIOError):
            locations.create_account_directory()


# ── Existence ───────────────────────────────────────────────────────


class TestExistence:
    def test_vault_exists(self, vault_name):
        locations = Locations(vault_name, VAULT_ONLY)
        locations.initialize_vault()
        locations.does_vault_exist()

    def test_vault_missing(self, tmp_path):
        locations = Locations(str(tmp_path / "nonexistent_vault"), VAULT_ONLY)
        with pytest.raises(VaultNotFoundError):
            locations.does_vault_exist()

    def test_vault_without_recipient(self, vault_name):
        locations = Locations(vault_name, VAULT_ONLY)
        locations.initialize_vault()
        locations.recipient_location.unlink()
        with pytest.raises(VaultNotFoundError):
            locations.does_vault_exist()

    def test_account_missing_directory(self, vault_name):
        locations = Locations(vault_name, ACCOUNT_NAME)
        locations.initialize_vault()
        with pytest.raises(VaultNotFoundError):
            locations.does_account_exist()

    def test_account_missing_data_file(self, vault_name):
        locations = Locations(vault_name, ACCOUNT_NAME)
        locations.create_account_directory()
        with pytest.raises(VaultNotFoundError):
            locations.does_account_exist()


# ── Enumeration ─────────────────────────────────────────────────────


class TestFindAccountNames:
    def test_two_accounts(self, vault_name):
        locations = Locations(vault_name, VAULT_ONLY)
        locations.initialize_vault()
        Locations(vault_name, "account1").create_account_directory()
        Locations(vault_name, "account2").create_account_directory()

        names = locations.find_account_names()
        assert len(names) == 2
        assert set(names) == {"account1", "account2"}

    def test_empty_vault(self, vault_name):
        locations = Locations(vault_name, VAULT_ONLY)
        locations.initialize_vault()
        assert locations.find_account_names() == []

    def test_skips_files(self, vault_name):
        locations = Locations(vault_name, VAULT_ONLY)
        locations.initialize_vault()
        (locations.vault_location / "stray.txt").write_text("x")
        Locations(vault_name, "account1").create_account_directory()
        assert locations.find_account_names() == ["account1"]

    def test_missing_vault(self, tmp_path):
        locations = Locations(str(tmp_path / "nonexistent_vault"), VAULT_ONLY)
        with pytest.raises(VaultNotFoundError):
            locations.find_account_names()

    def test_large_number_of_accounts(self, vault_name):
        locations = Locations(vault_name, VAULT_ONLY)
        locations.initialize_vault()
        created = {f"account_{i}" for i in range(1000)}
        for name in created:
            Locations(vault_name, name).create_account_directory()

        names = locations.find_account_names()
        assert len(names) == 1000
        assert set(names) == created


# ── Rename ──────────────────────────────────────────────────────────


class TestRenameDirectory:
    def test_rename(self, tmp_path):
        old_path, new_path = tmp_path / "test_old_dir", tmp_path / "test_new_dir"
        old_path.mkdir()
        rename_directory(old_path, new_path)
        assert not old_path.exists()
        assert new_path.is_dir()

    def test_rename_nonexistent(self, tmp_path):
        with pytest.raises(VaultNotFoundError):
            rename_directory(tmp_path / "nonexistent_dir", tmp_path / "new_dir")

    def test_rename_onto_existing(self, tmp_path):
        (tmp_path / "a").mkdir()
        (tmp_path / "b").mkdir()
        with pytest.raises(VaultIOError):
            rename_directory(tmp_path / "a", tmp_path / "b")
        assert (tmp_path / "a").is_dir()

    def test_rename_file_is_not_directory(self, tmp_path):
        (tmp_path / "file").write_text("x")
        with pytest.raises(VaultIOError):
            rename_directory(tmp_path / "file", tmp_path / "other")

    def test_rename_account(self, vault_name):
        locations = Locations(vault_name, ACCOUNT_NAME)
        locations.create_account_directory()
        (locations.account_location / DATA_FILE).write_bytes(b"u:c")

        renamed = locations.rename_account("renamed")
        assert renamed.account_name == "renamed"
        assert not locations.account_location.exists()
        assert renamed.data_location.read_bytes() == b"u:c"

    def test_rename_account_invalid_name(self, vault_name):
        locations = Locations(vault_name, ACCOUNT_NAME)
        locations.create_account_directory()
        with pytest.raises(InvalidInputError):
            locations.rename_account("")
        assert locations.account_location.is_dir()
