"""Command-line entry point. Allows python -m hypercyber."""

import argparse
import asyncio
import getpass
import sys
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

from hypercyber.api.catalogue import load_upload
from hypercyber.api.schemas import BreachStatus, LicenseType, RequestType, Severity
from hypercyber.app import Console
from hypercyber.client.errors import AuthenticationError, ConsoleError
from hypercyber.settings import RGPDRouteStyle
from hypercyber.shell import Route
from hypercyber.utils.logger import setup_logging
from hypercyber.views import CatalogueTab

Handler = Callable[[Console, argparse.Namespace], Awaitable[None]]


# =============================================================================
# HELPERS
# =============================================================================


async def _open(console: Console, route: Route) -> Any:
    """Navigate to a page, failing when the session gate redirects."""
    nav = await console.router.navigate(route)
    if nav.path != route.value:
        raise AuthenticationError(401, "Not logged in. Run: python -m hypercyber login")
    return nav.view


def _check(view: Any, result: Any = None) -> Any:
    """Raise the error a view captured, so the CLI exits non-zero."""
    if view.error:
        raise ConsoleError(view.error)
    return result


async def _select_entity(view: Any, entity_id: str | None) -> None:
    view.select_entity(entity_id)
    await view.load()
    _check(view)


# =============================================================================
# SESSION
# =============================================================================


async def run_login(console: Console, args: argparse.Namespace) -> None:
    view = await _open(console, Route.LOGIN)
    view.form.email = args.email
    view.form.password = args.password or getpass.getpass("Password: ")
    user = _check(view, await view.submit())
    print(f"✅ Logged in as {user.display_name}")


async def run_register(console: Console, args: argparse.Namespace) -> None:
    view = await _open(console, Route.LOGIN)
    view.toggle_mode()
    view.form.email = args.email
    view.form.password = args.password or getpass.getpass("Password: ")
    view.form.first_name = args.first_name or ""
    view.form.last_name = args.last_name or ""
    user = _check(view, await view.submit())
    print(f"✅ Account created for {user.display_name}")


async def run_logout(console: Console, _args: argparse.Namespace) -> None:
    await console.layout.logout()
    print("👋 Logged out")


async def run_whoami(console: Console, _args: argparse.Namespace) -> None:
    user = console.session.user
    if user is None:
        print("Not logged in")
        return
    print(user.display_name)
    claims = console.session.token_claims
    if claims and claims.exp:
        print(f"Token expires: {claims.exp.isoformat()}")


async def run_refresh(console: Console, _args: argparse.Namespace) -> None:
    await console.session.refresh()
    print("✅ Access token refreshed")


async def run_oidc_url(console: Console, _args: argparse.Namespace) -> None:
    view = await _open(console, Route.LOGIN)
    print(view.oidc_url)


async def run_oidc_callback(console: Console, args: argparse.Namespace) -> None:
    nav = await console.router.navigate(args.url)
    if nav.path != Route.DASHBOARD.value:
        raise AuthenticationError(401, "Federated login failed: token pair missing or rejected")
    print(f"✅ Logged in as {console.session.user.display_name}")


# =============================================================================
# PAGES
# =============================================================================


async def run_dashboard(console: Console, _args: argparse.Namespace) -> None:
    view = await _open(console, Route.DASHBOARD)
    await view.load()
    print(console.layout.render(Route.DASHBOARD))
    print(view.render())


async def run_entities(console: Console, args: argparse.Namespace) -> None:
    view = await _open(console, Route.ENTITIES)

    if args.action == "list":
        await view.load()
        print(_check(view, view.render()))
    elif args.action == "create":
        view.form.name = args.name
        view.form.description = args.description or ""
        entity = _check(view, await view.submit())
        print(f"✅ Entity created: {entity.id}")
    elif args.action == "update":
        entity = _check(view, await view.update(args.id, name=args.name, description=args.description))
        print(f"✅ Entity updated: {entity.id}")
    elif args.action == "users":
        members = await view.members(args.id)
        _check(view)
        for member in members:
            print(f"  - {member.email} ({member.role})")
        print(f"\nTotal: {len(members)}")


async def run_register_page(console: Console, args: argparse.Namespace) -> None:
    view = await _open(console, Route.RGPD_REGISTER)

    if args.action == "list":
        await _select_entity(view, args.entity)
        print(view.render())
    elif args.action == "add":
        view.select_entity(args.entity)
        form = view.form
        form.processing_name = args.name
        form.purpose = args.purpose
        form.legal_basis = args.legal_basis
        form.data_categories = args.data_categories or ""
        form.data_subjects = args.data_subjects or ""
        form.recipients = args.recipients or ""
        form.retention_period = args.retention_period or ""
        entry = _check(view, await view.submit())
        print(f"✅ Register entry added: {entry.id}")


async def run_requests(console: Console, args: argparse.Namespace) -> None:
    view = await _open(console, Route.RGPD_REQUESTS)

    if args.action == "list":
        await _select_entity(view, args.entity)
        print(view.render())
        print(f"\nPending: {len(view.pending())}")
    elif args.action == "create":
        view.select_entity(args.entity)
        form = view.form
        form.requester_name = args.name
        form.requester_email = args.email
        form.request_type = RequestType(args.type)
        form.description = args.description or ""
        request = _check(view, await view.submit())
        print(f"✅ Request recorded: {request.id}")
    elif args.action == "respond":
        request = _check(view, await view.respond(args.id, args.status, args.response))
        print(f"✅ Request {request.id} is now {request.status}")


async def run_breaches(console: Console, args: argparse.Namespace) -> None:
    view = await _open(console, Route.RGPD_BREACHES)

    if args.action == "list":
        await _select_entity(view, args.entity)
        print(view.render())
        print(f"\nActive: {len(view.active())}")
    elif args.action == "create":
        view.select_entity(args.entity)
        form = view.form
        form.breach_date = args.breach_date
        if args.discovery_date:
            form.discovery_date = args.discovery_date
        form.description = args.description
        form.data_categories_affected = args.data_categories or ""
        form.number_of_subjects = args.subjects or ""
        form.severity = Severity(args.severity)
        form.containment_measures = args.containment or ""
        breach = _check(view, await view.submit())
        print(f"✅ Breach declared: {breach.id}")
    elif args.action == "update":
        breach = None
        if args.status:
            breach = _check(view, await view.update_status(args.id, args.status))
        if args.authority_notified or args.subjects_notified:
            breach = _check(
                view,
                await view.mark_notified(
                    args.id,
                    authority=True if args.authority_notified else None,
                    subjects=True if args.subjects_notified else None,
                ),
            )
        if breach is None:
            print("Nothing to update")
            return
        print(f"✅ Breach {breach.id}: {breach.status}")


async def run_catalogue(console: Console, args: argparse.Namespace) -> None:
    view = await _open(console, Route.CATALOGUE)
    tab = view.select_tab(args.tab)

    if args.action == "list":
        await view.load()
        print(_check(tab, view.render()))
        return

    if args.action == "upload":
        license_key = next((k for k in await tab.load() if k.id == args.id), None)
        _check(tab)
        if license_key is None:
            raise ConsoleError(f"License key not found: {args.id}")
        outcome = await tab.upload(license_key, load_upload(Path(args.file)))
        _check(tab)
        print(f"✅ File uploaded for {outcome.license_key.name}")
        return

    form = tab.form
    form.name = args.name
    form.description = args.description or ""
    if args.tab == CatalogueTab.ENDPOINTS:
        form.endpoint_type = args.endpoint_type
        form.address = args.address or ""
    elif args.tab == CatalogueTab.LICENSE_KEYS:
        form.license_type = LicenseType.FILE if args.file else LicenseType.STRING
        form.key_value = args.key_value or ""
        form.file = load_upload(Path(args.file)) if args.file else None
    elif args.tab == CatalogueTab.SOFTWARE_VERSIONS:
        form.version = args.version
    elif args.tab == CatalogueTab.ENCRYPTION_ALGORITHMS:
        form.algorithm_type = args.algorithm_type
        form.key_size = str(args.key_size or "")
        form.standard = args.standard or ""

    created = await tab.submit()
    if created is None:
        _check(tab)
    if args.tab == CatalogueTab.LICENSE_KEYS:
        print(f"✅ License key created: {created.license_key.id}")
        # The record is kept even when the file was rejected
        _check(tab)
    else:
        print(f"✅ Created: {created.id}")


async def run_relations(console: Console, args: argparse.Namespace) -> None:
    view = await _open(console, Route.CATALOGUE)
    panel = view.relations(args.source_type, args.source_id)

    if args.action == "list":
        await panel.load()
        print(_check(panel, panel.render()))
    elif args.action == "create":
        form = panel.form
        form.target_type = args.target_type
        form.target_id = args.target_id
        form.relation_type = args.relation_type
        form.description = args.description or ""
        relation = _check(panel, await panel.submit())
        print(f"✅ Relation created: {relation.id}")
        print(panel.render())
    elif args.action == "delete":
        _check(panel, await panel.delete(args.id))
        print(f"🗑️  Relation deleted: {args.id}")


COMMANDS: dict[str, Handler] = {
    "login": run_login,
    "register": run_register,
    "logout": run_logout,
    "whoami": run_whoami,
    "refresh": run_refresh,
    "oidc-url": run_oidc_url,
    "oidc-callback": run_oidc_callback,
    "dashboard": run_dashboard,
    "entities": run_entities,
    "rgpd-register": run_register_page,
    "requests": run_requests,
    "breaches": run_breaches,
    "catalogue": run_catalogue,
    "relations": run_relations,
}


async def run_command(args: argparse.Namespace) -> None:
    """Build the console, restore the session and run one command."""
    route_style = RGPDRouteStyle(args.rgpd_routes) if args.rgpd_routes else None
    async with Console(base_url=args.api_url, route_style=route_style) as console:
        await console.start()
        await COMMANDS[args.command](console, args)


# =============================================================================
# PARSER
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hypercyber",
        description="HyperCyber - RGPD compliance and asset catalogue console",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m hypercyber login alice@example.com          # Sign in
  python -m hypercyber dashboard                        # Headline counters
  python -m hypercyber entities create "Acme"           # New entity
  python -m hypercyber rgpd-register add --entity ID \\
      --name Payroll --purpose "Pay staff" --legal-basis contract \\
      --data-categories "email, name"                   # Register entry
  python -m hypercyber requests respond ID completed    # Answer a request
  python -m hypercyber catalogue license-keys create "Office" --file key.lic
  python -m hypercyber relations create endpoint ID software_version ID2
        """,
    )
    parser.add_argument("--api-url", help="Backend base URL (overrides HYPERCYBER_API_URL)")
    parser.add_argument(
        "--rgpd-routes",
        choices=[s.value for s in RGPDRouteStyle],
        help="RGPD route style (overrides HYPERCYBER_RGPD_ROUTES)",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level, case-insensitive (overrides LOG_LEVEL)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command")

    # Session
    login_parser = subparsers.add_parser("login", help="Sign in with email and password")
    login_parser.add_argument("email")
    login_parser.add_argument("--password", help="Prompted when omitted")

    register_parser = subparsers.add_parser("register", help="Create an account")
    register_parser.add_argument("email")
    register_parser.add_argument("--password", help="Prompted when omitted")
    register_parser.add_argument("--first-name")
    register_parser.add_argument("--last-name")

    subparsers.add_parser("logout", help="Forget stored credentials")
    subparsers.add_parser("whoami", help="Show the current user")
    subparsers.add_parser("refresh", help="Refresh the access token")
    subparsers.add_parser("oidc-url", help="Print the federated login URL")

    callback_parser = subparsers.add_parser("oidc-callback", help="Complete federated login")
    callback_parser.add_argument("url", help="Landing URL, e.g. /auth/callback?token=...&refresh_token=...")

    # Pages
    subparsers.add_parser("dashboard", help="Headline counters")
    _add_entities_parser(subparsers)
    _add_register_parser(subparsers)
    _add_requests_parser(subparsers)
    _add_breaches_parser(subparsers)
    _add_catalogue_parser(subparsers)
    _add_relations_parser(subparsers)

    return parser


def _add_entities_parser(subparsers: Any) -> None:
    parser = subparsers.add_parser("entities", help="Organizational units")
    actions = parser.add_subparsers(dest="action", required=True)

    actions.add_parser("list")
    create = actions.add_parser("create")
    create.add_argument("name")
    create.add_argument("--description")
    update = actions.add_parser("update")
    update.add_argument("id")
    update.add_argument("--name")
    update.add_argument("--description")
    users = actions.add_parser("users")
    users.add_argument("id")


def _add_register_parser(subparsers: Any) -> None:
    parser = subparsers.add_parser("rgpd-register", help="Processing register")
    actions = parser.add_subparsers(dest="action", required=True)

    list_parser = actions.add_parser("list")
    list_parser.add_argument("--entity")
    add = actions.add_parser("add")
    add.add_argument("--entity", required=True)
    add.add_argument("--name", required=True)
    add.add_argument("--purpose", required=True)
    add.add_argument("--legal-basis", required=True)
    add.add_argument("--data-categories", help="Comma-separated")
    add.add_argument("--data-subjects", help="Comma-separated")
    add.add_argument("--recipients", help="Comma-separated")
    add.add_argument("--retention-period")


def _add_requests_parser(subparsers: Any) -> None:
    parser = subparsers.add_parser("requests", help="Data-subject access requests")
    actions = parser.add_subparsers(dest="action", required=True)

    list_parser = actions.add_parser("list")
    list_parser.add_argument("--entity")
    create = actions.add_parser("create")
    create.add_argument("--entity", required=True)
    create.add_argument("--name", required=True)
    create.add_argument("--email", required=True)
    create.add_argument("--type", choices=[t.value for t in RequestType], default=RequestType.ACCESS.value)
    create.add_argument("--description")
    respond = actions.add_parser("respond")
    respond.add_argument("id")
    respond.add_argument("status", choices=["completed", "rejected"])
    respond.add_argument("--response")


def _add_breaches_parser(subparsers: Any) -> None:
    parser = subparsers.add_parser("breaches", help="Breach declarations")
    actions = parser.add_subparsers(dest="action", required=True)

    list_parser = actions.add_parser("list")
    list_parser.add_argument("--entity")
    create = actions.add_parser("create")
    create.add_argument("--entity", required=True)
    create.add_argument("--breach-date", required=True, help="ISO date")
    create.add_argument("--discovery-date", help="ISO date (default: today)")
    create.add_argument("--description", required=True)
    create.add_argument("--data-categories", help="Comma-separated")
    create.add_argument("--subjects", help="Number of affected subjects")
    create.add_argument("--severity", choices=[s.value for s in Severity], default=Severity.MEDIUM.value)
    create.add_argument("--containment")
    update = actions.add_parser("update")
    update.add_argument("id")
    update.add_argument("--status", choices=[s.value for s in BreachStatus])
    update.add_argument("--authority-notified", action="store_true")
    update.add_argument("--subjects-notified", action="store_true")


def _add_catalogue_parser(subparsers: Any) -> None:
    parser = subparsers.add_parser("catalogue", help="Asset catalogue")
    tabs = parser.add_subparsers(dest="tab", required=True)

    for tab in CatalogueTab:
        tab_parser = tabs.add_parser(tab.value)
        actions = tab_parser.add_subparsers(dest="action", required=True)
        actions.add_parser("list")
        create = actions.add_parser("create")
        create.add_argument("name")
        create.add_argument("--description")

        if tab == CatalogueTab.ENDPOINTS:
            create.add_argument("--endpoint-type", default="machine")
            create.add_argument("--address")
        elif tab == CatalogueTab.LICENSE_KEYS:
            storage = create.add_mutually_exclusive_group(required=True)
            storage.add_argument("--key-value")
            storage.add_argument("--file", help="Key file to upload")
            upload = actions.add_parser("upload")
            upload.add_argument("id")
            upload.add_argument("file")
        elif tab == CatalogueTab.SOFTWARE_VERSIONS:
            create.add_argument("--version", required=True)
        elif tab == CatalogueTab.ENCRYPTION_ALGORITHMS:
            create.add_argument("--algorithm-type", default="symmetric")
            create.add_argument("--key-size", type=int)
            create.add_argument("--standard")


def _add_relations_parser(subparsers: Any) -> None:
    parser = subparsers.add_parser("relations", help="Typed catalogue relations")
    actions = parser.add_subparsers(dest="action", required=True)

    list_parser = actions.add_parser("list")
    list_parser.add_argument("source_type")
    list_parser.add_argument("source_id")
    create = actions.add_parser("create")
    create.add_argument("source_type")
    create.add_argument("source_id")
    create.add_argument("target_type")
    create.add_argument("target_id")
    create.add_argument("--relation-type", default="uses")
    create.add_argument("--description")
    delete = actions.add_parser("delete")
    delete.add_argument("source_type")
    delete.add_argument("source_id")
    delete.add_argument("id")


def main() -> None:
    """Main CLI."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    setup_logging(level=args.log_level)

    try:
        asyncio.run(run_command(args))

    except KeyboardInterrupt:
        print("\n⚠️  Interrupted")
        sys.exit(130)
    except ConsoleError as e:
        print(f"\n❌ ERROR: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
