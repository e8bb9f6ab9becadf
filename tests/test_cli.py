"""Tests for the storefront-cart command line"""
import json
from unittest.mock import AsyncMock, Mock

import pytest

from storefront import cli
from storefront.cart import CART_SESSION_KEY
from storefront.errors import ERROR_BOOK_NOT_FOUND
from storefront.services.models import Book, Service


@pytest.fixture
def mock_db(fake_repo):
    db = Mock()
    db.carts = fake_repo
    db.catalog = Mock()
    db.catalog.get_book_by_slug = AsyncMock(return_value=None)
    db.catalog.get_service_by_id = AsyncMock(return_value=None)
    db.get_user_id_for_token = AsyncMock(return_value=None)
    return db


def test_parser_add_book():
    args = cli.build_parser().parse_args(["add-book", "wolf-so-grim", "--format", "eBook", "--quantity", "2"])
    assert args.command == "add-book"
    assert args.slug == "wolf-so-grim"
    assert args.format == "eBook"
    assert args.quantity == 2


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args([])


@pytest.mark.asyncio
async def test_run_add_book(store, mock_db, sample_book):
    mock_db.catalog.get_book_by_slug.return_value = Book(**sample_book)
    args = cli.build_parser().parse_args(["add-book", "wolf-so-grim"])

    result = await cli.run_command(args, store, mock_db)

    assert result["control"]["status"] == "added"
    assert result["cart"]["cart_count"] == 1


@pytest.mark.asyncio
async def test_run_add_missing_book(store, mock_db):
    args = cli.build_parser().parse_args(["add-book", "nope"])
    assert await cli.run_command(args, store, mock_db) == {"error": ERROR_BOOK_NOT_FOUND}


@pytest.mark.asyncio
async def test_run_add_service_then_set_and_remove(store, mock_db, sample_service):
    mock_db.catalog.get_service_by_id.return_value = Service(**sample_service)
    parser = cli.build_parser()

    await cli.run_command(parser.parse_args(["add-service", "svc-1"]), store, mock_db)
    item_id = store.items[0].id

    result = await cli.run_command(parser.parse_args(["set", item_id, "3"]), store, mock_db)
    assert result["cart_count"] == 3

    result = await cli.run_command(parser.parse_args(["remove", item_id]), store, mock_db)
    assert result["items"] == []


@pytest.mark.asyncio
async def test_run_page_empty(store, mock_db):
    await store.load()
    result = await cli.run_command(cli.build_parser().parse_args(["page"]), store, mock_db)
    assert result["state"] == "empty"


@pytest.mark.asyncio
async def test_main_persists_profile_token(monkeypatch, tmp_path, capsys, mock_db, sample_book):
    mock_db.catalog.get_book_by_slug.return_value = Book(**sample_book)
    monkeypatch.setattr(cli, "get_database_async", AsyncMock(return_value=mock_db))
    monkeypatch.setattr(cli, "close_database", AsyncMock())
    profile = tmp_path / "profile.json"

    code = await cli.main_async(["--profile", str(profile), "add-book", "wolf-so-grim"])
    assert code == 0
    token = json.loads(profile.read_text())[CART_SESSION_KEY]
    capsys.readouterr()

    code = await cli.main_async(["--profile", str(profile), "add-book", "wolf-so-grim"])
    output = json.loads(capsys.readouterr().out)

    assert code == 0
    assert output["cart"]["cart_count"] == 2
    assert json.loads(profile.read_text())[CART_SESSION_KEY] == token


@pytest.mark.asyncio
async def test_main_rejects_bad_token(monkeypatch, tmp_path, mock_db):
    monkeypatch.setattr(cli, "get_database_async", AsyncMock(return_value=mock_db))
    close = AsyncMock()
    monkeypatch.setattr(cli, "close_database", close)

    code = await cli.main_async(["--profile", str(tmp_path / "p.json"), "--access-token", "bad", "show"])

    assert code == 1
    close.assert_awaited_once()


@pytest.mark.asyncio
async def test_run_add_failure_reports_error(store, mock_db, fake_repo, sample_service):
    mock_db.catalog.get_service_by_id.return_value = Service(**sample_service)
    fake_repo.fail_on.add("insert_item")

    result = await cli.run_command(cli.build_parser().parse_args(["add-service", "svc-1"]), store, mock_db)

    assert result["control"]["status"] == "error"
    assert result["error"]
    assert result["cart"]["items"] == []


@pytest.mark.asyncio
async def test_main_failed_add_exits_nonzero(monkeypatch, tmp_path, mock_db, fake_repo, sample_book):
    mock_db.catalog.get_book_by_slug.return_value = Book(**sample_book)
    fake_repo.fail_on.add("insert_item")
    monkeypatch.setattr(cli, "get_database_async", AsyncMock(return_value=mock_db))
    monkeypatch.setattr(cli, "close_database", AsyncMock())

    code = await cli.main_async(["--profile", str(tmp_path / "p.json"), "add-book", "wolf-so-grim"])

    assert code == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("command", [["remove", "nope"], ["set", "nope", "3"]])
async def test_main_unknown_item_exits_nonzero(monkeypatch, tmp_path, capsys, mock_db, command):
    monkeypatch.setattr(cli, "get_database_async", AsyncMock(return_value=mock_db))
    monkeypatch.setattr(cli, "close_database", AsyncMock())

    code = await cli.main_async(["--profile", str(tmp_path / "p.json"), *command])

    assert code == 1
    assert "Cart error" in capsys.readouterr().err
