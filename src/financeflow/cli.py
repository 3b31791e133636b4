"""CLI for FinanceFlow using Typer."""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from typing import get_args

import typer
from rich.console import Console
from rich.table import Table

from .config import load_settings
from .db import Database
from .exceptions import UnbalancedSplitError, ValidationError
from .ledger.activity import (
    HistoryFilter,
    TimeWindow,
    daily_cash_flow,
    filter_by_window,
    filter_history,
    is_inflow,
    is_outflow,
)
from .ledger.aggregator import FriendTab, agrees_with_backend, classify
from .models import (
    ExpenseEntry,
    Friend,
    FriendTransactionDraft,
    FriendTransactionType,
    LedgerEntry,
    Participant,
    PlainTransactionDraft,
    User,
    to_decimal,
)
from .notifications import NotificationAction, available_actions
from .profile import (
    APP_MODES,
    STYLE_PRESETS,
    THEMES,
    add_category,
    add_subcategory,
    remove_category,
    requires_password,
)
from .service import FinanceService
from .split import allocator
from .ui import (
    confirm_shared_transaction,
    select_category_interactive,
    select_friend_interactive,
)

app = typer.Typer(
    name="financeflow",
    help="Track spending, friend debts and split bills from the terminal",
)
friends_app = typer.Typer(help="Friends, balances and debts")
notifications_app = typer.Typer(help="Requests and payment reminders")
profile_app = typer.Typer(help="Profile, appearance and categories")

app.add_typer(friends_app, name="friends")
app.add_typer(notifications_app, name="notifications")
app.add_typer(profile_app, name="profile")

console = Console()

VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Verbose output")

# Plain profile fields that `profile set` may change
SETTABLE_KEYS = ("username", "email", "password", "phoneNumber", "upiId", "budget", "photoURL")


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    if not verbose:
        logging.getLogger("httpx").setLevel(logging.WARNING)


@contextmanager
def open_service(verbose: bool) -> Iterator[FinanceService]:
    """Load settings and the session store; report errors and exit 1."""
    setup_logging(verbose)
    db = None

    try:
        settings = load_settings()
        db = Database(settings.database_path)
        yield FinanceService(settings, db)
    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}")
        if verbose:
            raise
        sys.exit(1)
    finally:
        if db is not None:
            db.close()


def _choice(value: str, options, name: str) -> str:
    """Validate a value against a fixed set of options."""
    if value not in options:
        raise typer.BadParameter(f"{name} must be one of: {', '.join(options)}")
    return value


def format_money(amount: Decimal | float, use_color: bool = True) -> str:
    """
    Format money in accounting style with alignment.

    Negative amounts use parentheses: (₹85.02)
    Positive amounts have spaces:      ₹85.02
    """
    abs_amount = abs(amount)
    if amount < 0:
        if use_color:
            return f"(₹[red]{abs_amount:,.2f}[/red])"
        return f"(₹{abs_amount:,.2f})"
    if use_color:
        return f" [green]₹{abs_amount:,.2f}[/green] "
    return f" ₹{abs_amount:,.2f} "


def signed_amount(entry: LedgerEntry) -> Decimal:
    """Entry amount, negative for money going out."""
    return -entry.amount if is_outflow(entry) else entry.amount


def _find_friend(friends: list[Friend], name: str | None) -> Friend:
    """Resolve a friend by id or name, or ask interactively when omitted."""
    if name is None:
        friend = select_friend_interactive(friends)
        if friend is None:
            raise typer.Exit()
        return friend

    needle = name.strip().lower()
    for friend in friends:
        if friend.id.lower() == needle or friend.name.lower() == needle:
            return friend
    raise ValidationError(f"No friend named '{name}'")


def split_roster(user: User, friends: list[Friend]) -> list[Participant]:
    """Everyone who can be billed in a split, starting with the current user."""
    return [
        Participant(id=user.id, display_name="You"),
        *(Participant(id=f.id, display_name=f.name) for f in friends),
    ]


def _pick_category(user: User, description: str, category: str | None) -> tuple[str, str]:
    if category:
        return category, ""
    selection = select_category_interactive(user.categories, description)
    if selection is None:
        console.print("[yellow]Cancelled.[/yellow]")
        raise typer.Exit()
    return selection


def display_entries(entries: list[LedgerEntry], title: str, names: dict[str, str] | None = None):
    """Display ledger entries in a table, newest first."""
    names = names or {}
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Date", style="dim", width=16)
    table.add_column("Type", style="cyan")
    table.add_column("With")
    table.add_column("Category", style="yellow")
    table.add_column("Notes", no_wrap=False)
    table.add_column("Amount", justify="right", width=14)
    table.add_column("Status", justify="center")

    for entry in sorted(entries, key=lambda e: e.timestamp, reverse=True):
        counterparty = getattr(entry, "friend_id", None) or getattr(entry, "payer_id", "")
        category = " > ".join(filter(None, [entry.category, entry.subcategory]))
        notes = entry.notes[:40] + "..." if len(entry.notes) > 40 else entry.notes
        table.add_row(
            entry.timestamp.strftime("%Y-%m-%d %H:%M"),
            entry.type,
            names.get(counterparty, counterparty),
            category,
            notes,
            format_money(signed_amount(entry)),
            entry.status,
        )

    console.print(table)


# ============================================================================
# Account
# ============================================================================


@app.command()
def login(
    username: str = typer.Option(..., prompt="Username or email"),
    password: str = typer.Option(..., prompt=True, hide_input=True),
    verbose: bool = VERBOSE_OPTION,
):
    """Sign in to your FinanceFlow account."""
    with open_service(verbose) as service:
        user = service.login(username, password)
        console.print(f"\n[bold green]✓ Welcome back, {user.username}![/bold green]\n")


@app.command()
def signup(
    username: str = typer.Option(..., prompt=True),
    email: str = typer.Option(..., prompt=True),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True),
    verbose: bool = VERBOSE_OPTION,
):
    """Create a FinanceFlow account."""
    with open_service(verbose) as service:
        user = service.signup(username, email, password)
        console.print(f"\n[bold green]✓ Account created for {user.username}[/bold green]\n")


@app.command()
def logout(verbose: bool = VERBOSE_OPTION):
    """Forget the saved session."""
    with open_service(verbose) as service:
        service.logout()
        console.print("[green]Logged out.[/green]")


@app.command()
def whoami(verbose: bool = VERBOSE_OPTION):
    """Show the signed-in user."""
    with open_service(verbose) as service:
        display_profile(service.current_user())


# ============================================================================
# Dashboard & history
# ============================================================================


@app.command()
def dashboard(
    window: str = typer.Option("30D", "--window", "-w", help="Today, Yesterday, 7D, 30D or All"),
    insight: bool = typer.Option(False, "--insight", "-i", help="Ask GPT for a one-line tip"),
    verbose: bool = VERBOSE_OPTION,
):
    """
    Show balances, friend totals and daily cash flow.

    Totals come from the backend; the cash-flow table covers the chosen window.
    """
    window = _choice(window, [w for w in get_args(TimeWindow) if w != "Custom"], "window")

    with open_service(verbose) as service:
        user = service.current_user()

        console.print("\n[bold blue]Fetching dashboard...[/bold blue]")
        stats = service.fetch_dashboard()
        now = datetime.now().astimezone()
        history = filter_by_window(service.fetch_history(), window, now=now)

        console.print(f"\n[bold]Hi {user.username}[/bold]")
        console.print(f"  Liquid: {format_money(stats.liquid)}")
        console.print(f"    Cash: {format_money(stats.cash)}   Online: {format_money(stats.online)}")
        console.print(f"  In: {format_money(stats.incoming)}   Out: {format_money(-stats.outgoing)}")
        console.print(
            f"  Lent: {format_money(stats.money_given)}   "
            f"Borrowed: {format_money(-stats.money_taken)}   "
            f"Pending: {format_money(stats.pending)}"
        )

        if user.budget > 0:
            spent = sum((e.amount for e in history if isinstance(e, ExpenseEntry)), Decimal(0))
            used = spent / user.budget * 100
            style = "red" if used > 100 else "yellow" if used > 80 else "green"
            console.print(
                f"  Budget: [{style}]₹{spent:,.2f} of ₹{user.budget:,.2f} ({used:.0f}%)[/{style}]"
            )

        days = daily_cash_flow(history, now.tzinfo)
        if days:
            table = Table(title=f"Cash Flow ({window})", show_header=True, header_style="bold magenta")
            table.add_column("Day", style="dim")
            table.add_column("In", justify="right")
            table.add_column("Out", justify="right")
            for day in days:
                table.add_row(str(day.day), format_money(day.inflow), format_money(-day.outflow))
            console.print()
            console.print(table)

        if insight:
            text = service.generate_insight(stats)
            if text is None:
                console.print("\n[yellow]Set OPENAI_API_KEY to enable insights.[/yellow]")
            else:
                console.print(f"\n💡 [italic]{text}[/italic]")
        console.print()


@app.command()
def history(
    filter_: str = typer.Option("All", "--filter", "-f", help="All, Income, Expense or Pending"),
    window: str = typer.Option("All", "--window", "-w", help="Today, Yesterday, 7D, 30D or All"),
    limit: int = typer.Option(20, "--limit", "-n", help="Rows to show"),
    verbose: bool = VERBOSE_OPTION,
):
    """List recent transactions."""
    filter_ = _choice(filter_, get_args(HistoryFilter), "filter")
    window = _choice(window, [w for w in get_args(TimeWindow) if w != "Custom"], "window")

    with open_service(verbose) as service:
        names = {f.id: f.name for f in service.fetch_friends()}
        entries = filter_by_window(filter_history(service.fetch_history(), filter_), window)
        if not entries:
            console.print("[yellow]No transactions found.[/yellow]")
            return

        entries = sorted(entries, key=lambda e: e.timestamp, reverse=True)[:limit]
        display_entries(entries, f"History ({filter_}, {window})", names)

        inflow = sum((e.amount for e in entries if is_inflow(e)), Decimal(0))
        outflow = sum((e.amount for e in entries if is_outflow(e)), Decimal(0))
        console.print(f"  In: {format_money(inflow)}   Out: {format_money(-outflow)}")


@app.command()
def add(
    kind: str = typer.Argument(..., help="income or expense"),
    amount: float = typer.Argument(..., help="Amount"),
    category: str | None = typer.Option(None, "--category", "-c", help="Category (asks if omitted)"),
    subcategory: str = typer.Option("", "--subcategory", "-s", help="Subcategory"),
    notes: str = typer.Option("", "--notes", help="Notes"),
    cash: bool = typer.Option(False, "--cash", help="Paid in cash (default online)"),
    verbose: bool = VERBOSE_OPTION,
):
    """Record an income or expense."""
    kind = _choice(kind.lower(), ("income", "expense"), "kind")

    with open_service(verbose) as service:
        user = service.current_user()
        description = notes or f"{kind} of ₹{amount:,.2f}"
        chosen, chosen_sub = _pick_category(user, description, category)

        draft = PlainTransactionDraft(
            type=kind.capitalize(),
            amount=to_decimal(amount),
            category=chosen,
            subcategory=subcategory or chosen_sub,
            notes=notes,
            mode="Cash" if cash else "Online",
        )
        service.record_plain(draft)
        console.print(
            f"\n[bold green]✓ Saved {draft.type.lower()} of {format_money(draft.amount)}"
            f" under {draft.category}[/bold green]\n"
        )


@app.command()
def split(
    total: float = typer.Argument(..., help="Bill total"),
    with_: list[str] = typer.Option([], "--with", "-w", help="Friend to split with (repeatable)"),
    custom: list[str] = typer.Option(
        [], "--custom", help="Manual share as NAME=AMOUNT, 'me' for yourself (repeatable)"
    ),
    payer: str = typer.Option("me", "--payer", "-p", help="Who paid: 'me' or a friend"),
    category: str | None = typer.Option(None, "--category", "-c", help="Category (asks if omitted)"),
    notes: str = typer.Option("", "--notes", help="Notes"),
    cash: bool = typer.Option(False, "--cash", help="Paid in cash (default online)"),
    verbose: bool = VERBOSE_OPTION,
):
    """
    Split a bill with friends.

    Shares are equal unless --custom is given; manual shares are locked and
    the rest of the bill is spread over everyone else.
    """
    with open_service(verbose) as service:
        user = service.current_user()
        friends = service.fetch_friends()
        names = {p.id: p.display_name for p in split_roster(user, friends)}

        def participant_id(name: str) -> str:
            if name.strip().lower() in ("me", "you", user.username.lower()):
                return user.id
            return _find_friend(friends, name).id

        state = allocator.new_split(user.id, to_decimal(total))
        if not with_:
            for friend in iter(lambda: select_friend_interactive(friends), None):
                state = allocator.toggle_participant(state, friend.id)
        for name in with_:
            state = allocator.toggle_participant(state, participant_id(name))

        for item in custom:
            name, sep, value = item.partition("=")
            if not sep:
                raise ValidationError(f"Expected NAME=AMOUNT, got '{item}'")
            state = allocator.set_manual_share(state, participant_id(name), value)

        table = Table(title=f"Split of ₹{state.total:,.2f} ({state.mode})", header_style="bold magenta")
        table.add_column("Participant", style="cyan")
        table.add_column("Share", justify="right")
        table.add_column("", justify="center")
        for pid in state.selected:
            table.add_row(names.get(pid, pid), format_money(state.shares[pid]), "🔒" if pid in state.locked else "")
        console.print()
        console.print(table)
        console.print(f"  Allocated: {format_money(state.allocated)} of {format_money(state.total)}")

        if not state.is_balanced(service.settings.split_balance_tolerance):
            raise UnbalancedSplitError(state.total, state.allocated)

        payer_id = participant_id(payer)
        chosen, chosen_sub = _pick_category(user, notes or "Split bill", category)

        summary = (
            f"{names.get(payer_id, payer_id)} paid ₹{state.total:,.2f}, split "
            f"{len(state.selected)} ways"
        )
        if not confirm_shared_transaction(summary):
            console.print("[yellow]Cancelled.[/yellow]")
            return

        service.record_split(
            state,
            payer_id,
            chosen,
            subcategory=chosen_sub,
            notes=notes,
            mode="Cash" if cash else "Online",
        )
        console.print("\n[bold green]✓ Split saved. Participants will be notified.[/bold green]\n")


# ============================================================================
# Friends
# ============================================================================


@friends_app.command("list")
def friends_list(verbose: bool = VERBOSE_OPTION):
    """List friends and what's owed."""
    with open_service(verbose) as service:
        friends = service.fetch_friends()
        if not friends:
            console.print("[yellow]No friends yet.[/yellow]")
            return

        table = Table(title="Friends", show_header=True, header_style="bold magenta")
        table.add_column("Name", style="cyan")
        table.add_column("Email", style="dim")
        table.add_column("Balance", justify="right", width=14)
        table.add_column("Status", justify="center")

        for friend in sorted(friends, key=lambda f: f.name.lower()):
            table.add_row(
                friend.name + (" (manual)" if friend.is_manual else ""),
                friend.email or "",
                format_money(friend.balance),
                friend.status,
            )

        console.print(table)
        console.print("  [dim]Positive: they owe you. Negative: you owe them.[/dim]")


@friends_app.command("show")
def friends_show(
    name: str | None = typer.Argument(None, help="Friend name or id (asks if omitted)"),
    tab: str = typer.Option("Activity", "--tab", "-t", help="Activity, 'I Owe' or 'They Owe'"),
    verbose: bool = VERBOSE_OPTION,
):
    """Show everything recorded with one friend."""
    tab = _choice(tab, get_args(FriendTab), "tab")

    with open_service(verbose) as service:
        user = service.current_user()
        friend = _find_friend(service.fetch_friends(), name)
        ledger = service.friend_ledger(friend)

        console.print(f"\n[bold]{friend.name}[/bold]")
        console.print(f"  You owe: {format_money(-ledger.dues.i_owe)}")
        console.print(f"  They owe: {format_money(ledger.dues.they_owe)}")
        console.print(f"  Balance: {format_money(ledger.reported_balance)}")
        if not agrees_with_backend(ledger.derived_balance, ledger.reported_balance):
            console.print(
                f"  [yellow]⚠️  History adds up to {format_money(ledger.derived_balance, use_color=False)}"
                f"[/yellow]"
            )
        console.print()

        entries = {"Activity": ledger.entries, "I Owe": ledger.debts, "They Owe": ledger.credits}[tab]
        if not entries:
            console.print(f"[dim]Nothing under {tab}.[/dim]")
            return

        names = {user.id: "You", friend.id: friend.name}
        display_entries(entries, tab, names)

        if tab == "Activity":
            counted = [
                e for e in entries
                if classify(e, user.id, friend.id, service.settings.count_split_dues) != "Neutral"
            ]
            console.print(f"  [dim]{len(counted)} of {len(entries)} entries affect the balance[/dim]")


@friends_app.command("add")
def friends_add(
    username: str = typer.Argument(..., help="Username to send a request to"),
    verbose: bool = VERBOSE_OPTION,
):
    """Send a friend request."""
    with open_service(verbose) as service:
        service.send_friend_request(username)
        console.print(f"[green]✓ Friend request sent to {username}[/green]")


@friends_app.command("search")
def friends_search(
    query: str = typer.Argument(..., help="Name or email to look for"),
    verbose: bool = VERBOSE_OPTION,
):
    """Search for people to add."""
    with open_service(verbose) as service:
        users = service.search_users(query)
        if not users:
            console.print("[yellow]No users found.[/yellow]")
            return
        for found in users:
            console.print(f"  {found.get('username', '')}  [dim]{found.get('email', '')}[/dim]")


@friends_app.command("remove")
def friends_remove(
    name: str | None = typer.Argument(None, help="Friend name or id (asks if omitted)"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt"),
    verbose: bool = VERBOSE_OPTION,
):
    """Remove a friend. Only possible once you're settled up."""
    with open_service(verbose) as service:
        friend = _find_friend(service.fetch_friends(), name)

        if not yes:
            confirm = input(f"Remove {friend.name}? [y/N] ").strip().lower()
            if confirm not in ("y", "yes"):
                console.print("[yellow]Cancelled.[/yellow]")
                return

        service.remove_friend(friend.id)
        console.print(f"[green]✓ Removed {friend.name}[/green]")


@friends_app.command("record")
def friends_record(
    name: str | None = typer.Argument(None, help="Friend name or id (asks if omitted)"),
    amount: float = typer.Option(..., "--amount", "-a", help="Amount"),
    type_: str = typer.Option(
        "Money Given", "--type", "-t",
        help="'Money Given', 'Money Taken', 'He Paid Back' or 'I Paid Back'",
    ),
    notes: str = typer.Option("", "--notes", help="Notes"),
    cash: bool = typer.Option(False, "--cash", help="Paid in cash (default online)"),
    verbose: bool = VERBOSE_OPTION,
):
    """Record money lent, borrowed or paid back."""
    type_ = _choice(type_, get_args(FriendTransactionType), "type")

    with open_service(verbose) as service:
        friend = _find_friend(service.fetch_friends(), name)
        draft = FriendTransactionDraft(
            type=type_,
            friend_id=friend.id,
            amount=to_decimal(amount),
            notes=notes,
            mode="Cash" if cash else "Online",
        )

        if not confirm_shared_transaction(f"{draft.type} ₹{draft.amount:,.2f} with {friend.name}"):
            console.print("[yellow]Cancelled.[/yellow]")
            return

        service.record_friend(draft)
        console.print(
            f"\n[bold green]✓ Recorded. {friend.name} will be asked to approve.[/bold green]\n"
        )


# ============================================================================
# Notifications
# ============================================================================


@notifications_app.command("list")
def notifications_list(
    all_: bool = typer.Option(False, "--all", "-a", help="Include resolved ones"),
    verbose: bool = VERBOSE_OPTION,
):
    """List notifications and the actions available on each."""
    with open_service(verbose) as service:
        notifications = service.fetch_notifications()
        if not all_:
            notifications = [n for n in notifications if not n.is_resolved]
        if not notifications:
            console.print("[green]All caught up![/green]")
            return

        table = Table(title="Notifications", show_header=True, header_style="bold magenta")
        table.add_column("ID", style="dim")
        table.add_column("From", style="cyan")
        table.add_column("Message", no_wrap=False)
        table.add_column("Amount", justify="right")
        table.add_column("Actions", style="yellow")

        for n in notifications:
            actions = available_actions(n)
            table.add_row(
                n.id,
                n.sender_name,
                n.message,
                format_money(n.amount) if n.amount is not None else "",
                ", ".join(actions) if actions else "[dim]resolved[/dim]",
            )

        console.print(table)


@notifications_app.command("resolve")
def notifications_resolve(
    notification_id: str = typer.Argument(..., help="Notification id"),
    action: str = typer.Argument(..., help="approve, reject, approve_friend, already_paid, ..."),
    amount: float | None = typer.Option(None, "--amount", help="Amount paid (already_paid only)"),
    verbose: bool = VERBOSE_OPTION,
):
    """Act on a notification."""
    action = _choice(action, get_args(NotificationAction), "action")

    with open_service(verbose) as service:
        notification = next(
            (n for n in service.fetch_notifications() if n.id == notification_id), None
        )
        if notification is None:
            raise ValidationError(f"No notification with id {notification_id}")

        link = service.resolve_notification(notification, action, amount)
        if link:
            console.print(f"\nOpen this link in your UPI app to pay:\n  [cyan]{link}[/cyan]\n")
        else:
            console.print(f"[green]✓ Done ({action})[/green]")


# ============================================================================
# Profile
# ============================================================================


def display_profile(user: User):
    """Display the user's profile."""
    console.print(f"\n[bold]{user.username}[/bold] [dim]({user.id})[/dim]")
    console.print(f"  Email: {user.email or '—'}")
    console.print(f"  Phone: {user.phone_number or '—'}")
    console.print(f"  UPI: {user.upi_id or '—'}")
    console.print(f"  Verified: {'✓' if user.is_verified else '✗'}")
    console.print(f"  Budget: {format_money(user.budget) if user.budget > 0 else 'not set'}")
    console.print(
        f"  Appearance: {user.theme} / {user.mode} / "
        f"{STYLE_PRESETS.get(user.style_preset, user.style_preset)}"
    )

    if user.categories:
        console.print("  Categories:")
        for category in user.categories:
            subs = f" [dim]({', '.join(category.subcategories)})[/dim]" if category.subcategories else ""
            console.print(f"    • {category.name}{subs}")
    console.print()


def _update(service: FinanceService, updates: dict, message: str):
    password = None
    if requires_password(updates):
        password = typer.prompt("Current password", hide_input=True)
    service.update_profile(updates, password)
    console.print(f"[green]✓ {message}[/green]")


@profile_app.command("show")
def profile_show(verbose: bool = VERBOSE_OPTION):
    """Show your profile."""
    with open_service(verbose) as service:
        display_profile(service.current_user())


@profile_app.command("set")
def profile_set(
    key: str = typer.Argument(..., help=", ".join(SETTABLE_KEYS)),
    value: str = typer.Argument(..., help="New value"),
    verbose: bool = VERBOSE_OPTION,
):
    """Change a profile field. Email, phone and password ask for your password."""
    key = _choice(key, SETTABLE_KEYS, "key")

    with open_service(verbose) as service:
        _update(service, {key: value}, f"Updated {key}")


@profile_app.command("verify")
def profile_verify(
    phone: str = typer.Argument(..., help="10-digit phone number"),
    upi: str = typer.Argument(..., help="UPI ID (name@bank)"),
    verbose: bool = VERBOSE_OPTION,
):
    """Verify your account with a phone number and UPI ID."""
    with open_service(verbose) as service:
        password = typer.prompt("Current password", hide_input=True)
        service.verify_account(phone, upi, password)
        console.print("[green]✓ Account verified[/green]")


@profile_app.command("theme")
def profile_theme(
    name: str = typer.Argument(..., help=", ".join(THEMES)),
    verbose: bool = VERBOSE_OPTION,
):
    """Change the accent colour."""
    with open_service(verbose) as service:
        _update(service, {"theme": name}, f"Theme set to {name}")


@profile_app.command("mode")
def profile_mode(
    mode: str = typer.Argument(..., help=" or ".join(APP_MODES)),
    verbose: bool = VERBOSE_OPTION,
):
    """Switch between light and dark mode."""
    with open_service(verbose) as service:
        _update(service, {"mode": mode}, f"Mode set to {mode}")


@profile_app.command("preset")
def profile_preset(
    preset: str = typer.Argument(..., help=", ".join(STYLE_PRESETS)),
    verbose: bool = VERBOSE_OPTION,
):
    """Change the style preset."""
    with open_service(verbose) as service:
        _update(service, {"stylePreset": preset}, f"Style set to {STYLE_PRESETS.get(preset, preset)}")


@profile_app.command("add-category")
def profile_add_category(
    name: str = typer.Argument(..., help="Category name"),
    verbose: bool = VERBOSE_OPTION,
):
    """Add a spending category."""
    with open_service(verbose) as service:
        categories = add_category(service.current_user().categories, name)
        _update(service, {"categories": categories}, f"Added category {name}")


@profile_app.command("add-subcategory")
def profile_add_subcategory(
    category: str = typer.Argument(..., help="Existing category"),
    name: str = typer.Argument(..., help="Subcategory name"),
    verbose: bool = VERBOSE_OPTION,
):
    """Add a subcategory under a category."""
    with open_service(verbose) as service:
        categories = add_subcategory(service.current_user().categories, category, name)
        _update(service, {"categories": categories}, f"Added {name} to {category}")


@profile_app.command("remove-category")
def profile_remove_category(
    name: str = typer.Argument(..., help="Category name"),
    verbose: bool = VERBOSE_OPTION,
):
    """Remove a category and its subcategories."""
    with open_service(verbose) as service:
        categories = remove_category(service.current_user().categories, name)
        _update(service, {"categories": categories}, f"Removed category {name}")


if __name__ == "__main__":
    app()
