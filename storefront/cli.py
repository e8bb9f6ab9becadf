#!/usr/bin/env python3
"""
Drive the storefront cart from a terminal.

The anonymous session token is kept in a JSON profile file, the CLI's
equivalent of browser local storage.

Usage:
    storefront-cart show
    storefront-cart add-book wolf-so-grim --format Paperback
    storefront-cart add-service <service-id> --quantity 2
    storefront-cart set <item-id> 3
    storefront-cart remove <item-id>
    storefront-cart clear

Required environment variables (read from .env if present):
    - SUPABASE_URL
    - SUPABASE_SERVICE_ROLE_KEY
"""
import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from storefront.cart import (
    AddToCartControl,
    AddToCartStatus,
    CartPageView,
    CartStore,
    FileTokenStorage,
    IdentityResolver,
)
from storefront.catalog import book_draft, service_draft
from storefront.errors import ERROR_BOOK_NOT_FOUND, ERROR_SERVICE_NOT_FOUND, CartError
from storefront.logging import get_logger
from storefront.services.database import Database, close_database, get_database_async

logger = get_logger(__name__)

DEFAULT_PROFILE = Path.home() / ".storefront" / "profile.json"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="storefront-cart", description="Storefront cart from the terminal")
    parser.add_argument("--profile", type=Path, default=DEFAULT_PROFILE, help="token storage file")
    parser.add_argument("--access-token", help="Supabase access token of a signed-in user")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("show", help="print the cart snapshot")
    sub.add_parser("page", help="print the cart page model")
    sub.add_parser("clear", help="remove every item")
    sub.add_parser("refresh", help="reload items from the database")

    add_book = sub.add_parser("add-book", help="add a book by slug")
    add_book.add_argument("slug")
    add_book.add_argument("--format")
    add_book.add_argument("--quantity", type=int)

    add_service = sub.add_parser("add-service", help="add a service by id")
    add_service.add_argument("service_id")
    add_service.add_argument("--quantity", type=int)

    set_qty = sub.add_parser("set", help="set an item's quantity (0 removes)")
    set_qty.add_argument("item_id")
    set_qty.add_argument("quantity", type=int)

    remove = sub.add_parser("remove", help="remove an item")
    remove.add_argument("item_id")
    return parser


async def run_command(args: argparse.Namespace, store: CartStore, db: Database) -> dict:
    """Execute one command against the store; returns what to print."""
    command = args.command

    if command in ("add-book", "add-service"):
        if command == "add-book":
            book = await db.catalog.get_book_by_slug(args.slug)
            if not book:
                return {"error": ERROR_BOOK_NOT_FOUND}
            draft = book_draft(book, args.format, args.quantity)
        else:
            service = await db.catalog.get_service_by_id(args.service_id)
            if not service:
                return {"error": ERROR_SERVICE_NOT_FOUND}
            draft = service_draft(service, args.quantity)
        control = AddToCartControl(store, draft, added_delay=0, error_delay=0)
        status = await control.invoke()
        result = {"control": control.to_dict(), "cart": store.snapshot()}
        if status is AddToCartStatus.ERROR:
            result["error"] = control.error
        return result

    # CartError propagates to main_async
    if command == "set":
        await store.update_quantity(args.item_id, args.quantity)
    elif command == "remove":
        await store.remove_item(args.item_id)
    elif command == "clear":
        await store.clear_cart()
    elif command == "refresh":
        await store.refresh_cart()
    elif command == "page":
        return CartPageView(store).render()
    return store.snapshot()


async def main_async(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    db = await get_database_async()
    try:
        user_id = None
        if args.access_token:
            user_id = await db.get_user_id_for_token(args.access_token)
            if not user_id:
                print("Access token rejected", file=sys.stderr)
                return 1

        resolver = IdentityResolver(FileTokenStorage(args.profile), user_id=user_id)
        store = CartStore(db.carts, resolver)
        try:
            await store.load()
            result = await run_command(args, store, db)
        except CartError as e:
            print(f"Cart error: {e}", file=sys.stderr)
            return 1
        print(json.dumps(result, indent=2, default=str))
        return 0 if "error" not in result else 1
    finally:
        await close_database()


def main() -> None:
    sys.exit(asyncio.run(main_async()))


if __name__ == "__main__":
    main()
