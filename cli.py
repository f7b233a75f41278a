#!/usr/bin/env python3
"""Contact Dashboard CLI."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from contact_dashboard.analysis import build_analytics
from contact_dashboard.config import ConfigError, Settings, load_settings
from contact_dashboard.contact_client import ContactAPIError, ContactServiceClient
from contact_dashboard.contacts import (
    ContactValidationError,
    build_draft,
    build_import_template,
    build_patch,
)
from contact_dashboard.contacts.models import Contact
from contact_dashboard.notifications import NotificationCenter, NotificationKind
from contact_dashboard.store import CacheAvailability, ContactStore, ImportFileError


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="contact-dashboard",
        description="Manage contacts stored in the remote contacts service.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log HTTP requests and store activity.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List contacts.")
    list_parser.add_argument("--search", default="", help="Filter by name, email or phone.")
    list_parser.add_argument("--tag", help="Only contacts with this tag.")

    show_parser = subparsers.add_parser("show", help="Show one contact.")
    show_parser.add_argument("contact_id")

    add_parser = subparsers.add_parser("add", help="Create a contact.")
    _add_contact_fields(add_parser, required=True)

    update_parser = subparsers.add_parser("update", help="Patch a contact.")
    update_parser.add_argument("contact_id")
    _add_contact_fields(update_parser, required=False)

    delete_parser = subparsers.add_parser("delete", help="Delete a contact.")
    delete_parser.add_argument("contact_id")

    search_parser = subparsers.add_parser("search", help="Server-side search.")
    search_parser.add_argument("query")

    import_parser = subparsers.add_parser("import", help="Import contacts from a CSV file.")
    import_parser.add_argument("file", type=Path)

    subparsers.add_parser("sync", help="Run the server-side contact sync.")

    export_parser = subparsers.add_parser("export", help="Download all contacts as CSV.")
    export_parser.add_argument("--output", type=Path, help="Destination file.")

    template_parser = subparsers.add_parser("template", help="Write the CSV import template.")
    template_parser.add_argument("--output", type=Path, help="Destination file (default: stdout).")

    subparsers.add_parser("stats", help="Show contact analytics.")

    subparsers.add_parser(
        "check-config",
        help="Show the resolved configuration.",
    )

    return parser


def _add_contact_fields(parser: argparse.ArgumentParser, *, required: bool) -> None:
    parser.add_argument("--first-name", dest="firstName", required=required)
    parser.add_argument("--last-name", dest="lastName", required=required)
    parser.add_argument("--email", required=required)
    parser.add_argument("--phone", required=required)
    parser.add_argument("--company")
    parser.add_argument("--job-title", dest="jobTitle")
    parser.add_argument("--notes")
    parser.add_argument(
        "--tag",
        dest="tags",
        action="append",
        help="Tag to attach (repeatable).",
    )


def _form_fields(args: argparse.Namespace) -> Dict[str, object]:
    names = ("firstName", "lastName", "email", "phone", "company", "jobTitle", "notes", "tags")
    return {name: getattr(args, name) for name in names if getattr(args, name, None) is not None}


def _build_store(settings: Settings, center: NotificationCenter) -> ContactStore:
    return ContactStore(
        ContactServiceClient(settings),
        center,
        download_dir=settings.download_dir,
    )


def _print_notifications(center: NotificationCenter) -> None:
    for item in center.drain():
        stream = sys.stderr if item.kind is NotificationKind.ERROR else sys.stdout
        print(f"[{item.kind.value}] {item.title}: {item.message}", file=stream)


def _print_contacts(contacts: List[Contact]) -> None:
    if not contacts:
        print("No contacts found")
        return
    for contact in contacts:
        print(contact.format_line())
    print(f"\n{len(contacts)} contact(s)")


def _print_contact(contact: Contact) -> None:
    print(f"{contact.full_name} ({contact.id})")
    print(f"  Email:   {contact.email}")
    print(f"  Phone:   {contact.phone}")
    if contact.company or contact.job_title:
        print(f"  Company: {contact.company or '-'} / {contact.job_title or '-'}")
    if contact.tags:
        print(f"  Tags:    {', '.join(contact.tags)}")
    if contact.address and not contact.address.is_empty:
        parts = [v for v in contact.address.to_dict().values() if v]
        print(f"  Address: {', '.join(parts)}")
    if contact.notes:
        print(f"  Notes:   {contact.notes}")
    if contact.updated_at:
        print(f"  Updated: {contact.updated_at:%Y-%m-%d %H:%M}")


def _load_cache(store: ContactStore) -> bool:
    store.fetch_all()
    if store.availability is CacheAvailability.DEGRADED:
        print(f"Contacts unavailable: {store.error}", file=sys.stderr)
        return False
    return True


def _cmd_list(store: ContactStore, search: str, tag: Optional[str]) -> int:
    if not _load_cache(store):
        return 1
    _print_contacts(store.filter_contacts(search, {"tag": tag} if tag else {}))
    return 0


def _cmd_show(store: ContactStore, contact_id: str) -> int:
    if not _load_cache(store):
        return 1
    contact = store.get_contact(contact_id)
    if contact is None:
        print(f"Contact {contact_id} not found.", file=sys.stderr)
        return 1
    _print_contact(contact)
    return 0


def _cmd_add(store: ContactStore, args: argparse.Namespace) -> int:
    try:
        draft = build_draft(_form_fields(args))
    except ContactValidationError as exc:
        for name, message in exc.errors.items():
            print(f"{name}: {message}", file=sys.stderr)
        return 1
    created = store.add_contact(draft)
    _print_contact(created)
    return 0


def _cmd_update(store: ContactStore, args: argparse.Namespace) -> int:
    try:
        patch = build_patch(_form_fields(args))
    except ContactValidationError as exc:
        for name, message in exc.errors.items():
            print(f"{name}: {message}", file=sys.stderr)
        return 1
    if not patch:
        print("No updates provided.", file=sys.stderr)
        return 1
    updated = store.update_contact(args.contact_id, patch)
    _print_contact(updated)
    return 0


def _cmd_search(store: ContactStore, query: str) -> int:
    if not store.search_contacts(query):
        return 1
    _print_contacts(store.contacts)
    return 0


def _cmd_import(store: ContactStore, path: Path) -> int:
    if not path.exists():
        print(f"File not found: {path}", file=sys.stderr)
        return 1
    result = store.import_contacts(path)
    status = store.import_status
    print(f"{status.message} {result.get('message') or ''}".strip())
    print(f"Contacts now cached: {status.total_rows}")
    return 0


def _cmd_sync(store: ContactStore) -> int:
    store.sync_contacts()
    status = store.sync_status
    print(f"{status.message} ({status.total_rows} contacts, {status.duration_seconds:.1f}s)")
    return 0


def _cmd_export(store: ContactStore, output: Optional[Path]) -> int:
    path = store.export_contacts(output)
    if path is None:
        return 1
    print(f"Exported contacts to {path}")
    return 0


def _cmd_template(output: Optional[Path]) -> int:
    template = build_import_template()
    if output is None:
        sys.stdout.write(template)
        return 0
    output.write_text(template, encoding="utf-8")
    print(f"Template written to {output}")
    return 0


def _cmd_stats(store: ContactStore) -> int:
    if not _load_cache(store):
        return 1
    report = build_analytics(store.contacts)
    stats = report["stats"]
    print(
        f"Contacts: {stats['totalContacts']} | Companies: {stats['companiesCount']} | "
        f"Tags: {stats['tagsCount']} | Updated in 30 days: {stats['recentContacts']}"
    )
    if report["tags"]:
        print("\nTags:")
        for tag, count in report["tags"].items():
            print(f"  {tag:<20} {count}")
    if report["companies"]:
        print("\nTop companies:")
        for entry in report["companies"]:
            print(f"  {entry['company']:<20} {entry['count']}")
    return 0


def _cmd_check_config(settings: Settings) -> int:
    token = "yes" if settings.api_token else "no"
    print(
        f"API: {settings.api_base_url}",
        f"| timeout={settings.timeout_seconds:g}s",
        f"| token configured: {token}",
        f"| environment={settings.environment}",
    )
    print(f"Downloads: {settings.download_dir}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "template":
        return _cmd_template(args.output)

    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    if args.command == "check-config":
        return _cmd_check_config(settings)

    center = NotificationCenter()
    store = _build_store(settings, center)
    try:
        if args.command == "list":
            return _cmd_list(store, args.search, args.tag)
        if args.command == "show":
            return _cmd_show(store, args.contact_id)
        if args.command == "add":
            return _cmd_add(store, args)
        if args.command == "update":
            return _cmd_update(store, args)
        if args.command == "delete":
            store.delete_contact(args.contact_id)
            return 0
        if args.command == "search":
            return _cmd_search(store, args.query)
        if args.command == "import":
            return _cmd_import(store, args.file)
        if args.command == "sync":
            return _cmd_sync(store)
        if args.command == "export":
            return _cmd_export(store, args.output)
        if args.command == "stats":
            return _cmd_stats(store)
    except (ContactAPIError, ImportFileError, OSError) as exc:
        print(f"{args.command} failed: {exc}", file=sys.stderr)
        return 1
    finally:
        _print_notifications(center)
        store.close()

    parser.error(f"Unknown command: {args.command}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
