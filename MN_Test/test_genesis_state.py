import datetime
import json
import tempfile
from pathlib import Path

import pytest

from MN_Account.account import AccountGenerator
from MN_Account.amount import Coin
from MN_Address.address import AccountAddress
from MN_Genesis.state import (
    GenesisDocument,
    GenesisState,
    account_address_of,
    load_genesis,
    parse_genesis_time,
)
from MN_Tool_Box.errors import DuplicateAccountError, GenesisFileError

UTC = datetime.timezone.utc
EXISTING = AccountAddress(bytes([9] * 20))
MODULE = AccountAddress(bytes([5] * 20))


def make_genesis(genesis_time="2022-01-15T00:00:00Z"):
    return {
        "genesis_time": genesis_time,
        "chain_id": "umee-1",
        "app_state": {
            "auth": {
                "params": {"max_memo_characters": "256"},
                "accounts": [
                    {
                        "@type": "/cosmos.auth.v1beta1.BaseAccount",
                        "address": str(EXISTING),
                        "pub_key": None,
                        "account_number": "3",
                        "sequence": "0",
                    },
                    {
                        "@type": "/cosmos.auth.v1beta1.ModuleAccount",
                        "base_account": {
                            "address": str(MODULE),
                            "pub_key": None,
                            "account_number": "1",
                            "sequence": "0",
                        },
                        "name": "distribution",
                        "permissions": [],
                    },
                ],
            },
            "bank": {
                "params": {"send_enabled": [], "default_send_enabled": True},
                "balances": [{"address": str(EXISTING), "coins": [{"denom": "uumee", "amount": "1000"}]}],
                "supply": [{"denom": "uumee", "amount": "1000"}],
                "denom_metadata": [],
            },
            "staking": {"params": {"bond_denom": "uumee"}},
        },
    }


@pytest.fixture
def state():
    return GenesisState(GenesisDocument(make_genesis()))


def test_parse_genesis_time_variants():
    assert parse_genesis_time("2022-01-15T00:00:00Z") == datetime.datetime(2022, 1, 15, tzinfo=UTC)
    assert parse_genesis_time("2021-10-05T17:00:00.123456789Z") == datetime.datetime(
        2021, 10, 5, 17, 0, 0, 123456, tzinfo=UTC)
    assert parse_genesis_time("2022-01-15T02:00:00+02:00") == datetime.datetime(2022, 1, 15, tzinfo=UTC)
    assert parse_genesis_time("0001-01-01T00:00:00Z") is None
    assert parse_genesis_time("") is None
    assert parse_genesis_time(None) is None
    with pytest.raises(GenesisFileError):
        parse_genesis_time("15/01/2022")


def test_account_address_of_nested_types():
    generator = AccountGenerator()
    vesting, _ = generator.generate(EXISTING, "1", datetime.datetime(2022, 1, 1, tzinfo=UTC), 1, 1)
    assert account_address_of(vesting.to_dict()) == str(EXISTING)
    assert account_address_of({"base_account": {"address": "umee1x"}}) == "umee1x"
    with pytest.raises(GenesisFileError):
        account_address_of({"@type": "x"})


def test_document_without_app_state_is_rejected():
    with pytest.raises(GenesisFileError):
        GenesisDocument({"genesis_time": "2022-01-15T00:00:00Z"})
    with pytest.raises(GenesisFileError):
        GenesisState(GenesisDocument({"app_state": {"auth": {}}}))


def test_add_updates_accounts_balances_and_supply(state):
    account, balance = AccountGenerator().generate(AccountAddress(bytes([1] * 20)), "2.5", None, 0, 0)
    state.add(account, balance)

    assert state.contains(account.address)
    assert len(state.accounts) == 3
    assert len(state.balances) == 2
    assert state.supply == (Coin("uumee", 2_501_000),)
    assert state.supply_of("uumee") == 2_501_000
    assert state.find_balance(account.address)["coins"] == [{"denom": "uumee", "amount": "2500000"}]


def test_duplicate_address_rejected_even_with_foreign_prefix(state):
    generator = AccountGenerator()
    with pytest.raises(DuplicateAccountError):
        state.add(*generator.generate_from_raw(EXISTING.to_bech32("cosmos"), "1", None, 0, 0))
    with pytest.raises(DuplicateAccountError):
        state.add(*generator.generate(MODULE, "1", None, 0, 0))

    fresh = AccountAddress(bytes([2] * 20))
    state.add(*generator.generate(fresh, "1", None, 0, 0))
    with pytest.raises(DuplicateAccountError) as excinfo:
        state.add(*generator.generate(fresh, "3", None, 0, 0))
    assert str(fresh) in str(excinfo.value)
    assert state.supply_of("uumee") == 1_001_000


def test_commit_sorts_and_writes_back(state):
    generator = AccountGenerator()
    for byte in (8, 1, 4):
        state.add(*generator.generate(AccountAddress(bytes([byte] * 20)), "1", None, 0, 0))

    document = state.commit()
    bank = document.app_state["bank"]
    order = [AccountAddress(bytes([b] * 20)) for b in (1, 4, 8, 9)]
    assert [entry["address"] for entry in bank["balances"]] == [str(a) for a in order]
    assert bank["supply"] == [{"denom": "uumee", "amount": "3001000"}]
    assert bank["denom_metadata"] == []

    numbers = [entry.get("account_number") or entry.get("base_account", {}).get("account_number")
               for entry in document.app_state["auth"]["accounts"]]
    assert numbers == ["0", "0", "0", "1", "3"]
    assert document.app_state["auth"]["params"] == {"max_memo_characters": "256"}
    assert document.app_state["staking"] == {"params": {"bond_denom": "uumee"}}


def test_write_and_reload_round_trip(state):
    state.add(*AccountGenerator().generate(AccountAddress(bytes([3] * 20)), "7", None, 0, 0))
    document = state.commit()
    with tempfile.TemporaryDirectory() as td:
        target = Path(td) / "out" / "genesis.json"
        document.write(target)
        text = target.read_text(encoding="utf-8")
        assert text.endswith("}\n")
        assert list(Path(td, "out").iterdir()) == [target]

        reloaded = load_genesis(target)
        assert reloaded.data == json.loads(text)
        assert reloaded.genesis_time == datetime.datetime(2022, 1, 15, tzinfo=UTC)
        assert GenesisState(reloaded).supply_of("uumee") == 7_001_000


def test_load_genesis_errors():
    with tempfile.TemporaryDirectory() as td:
        with pytest.raises(GenesisFileError):
            load_genesis(Path(td) / "missing.json")
        broken = Path(td) / "broken.json"
        broken.write_text("{not json", encoding="utf-8")
        with pytest.raises(GenesisFileError):
            load_genesis(broken)


def test_invalid_existing_address_is_file_error():
    data = make_genesis()
    data["app_state"]["bank"]["balances"][0]["address"] = "umee1notvalid"
    with pytest.raises(GenesisFileError):
        GenesisState(GenesisDocument(data))
