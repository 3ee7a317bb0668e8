"""
Interactive shopper console — product page → cart → checkout → gateway →
confirmation, against a running storefront service.

┌───────────────────────────────────────────────────────────────────────┐
│  PAGE            COMMANDS                                              │
├───────────────────────────────────────────────────────────────────────┤
│  shop            products, add                                         │
│  cart            cart, inc, dec, set, rm, clear                        │
│  checkout        checkout, retry                                       │
│  mock gateway    pay, status                                           │
│  confirmation    resume                                                │
└───────────────────────────────────────────────────────────────────────┘
"""

from __future__ import annotations

import asyncio
import uuid

import httpx
from kungfu import Ok, Error

from storefront import pricing as P
from storefront.cart import CartLedger
from storefront.checkout import (
    CheckoutOrchestrator,
    CheckoutOutcome,
    CheckoutState,
    PaymentTracker,
    ShippingForm,
)
from storefront.client import StorefrontClient
from storefront.config import Settings, load_settings
from storefront.log import add_context, clear_context, configure_logging
from storefront.policy import Policy
from storefront.reconcile import Reconciler
from storefront.storage import (
    CheckoutLease,
    CorrelationRecord,
    SQLAlchemyStorage,
    Storage,
    create_storage_database,
)


# ═══════════════════════════════════════════════════════════════════════════════
# Help
# ═══════════════════════════════════════════════════════════════════════════════

HELP_TEXT = """
┌─────────────────────────────────────────────────────────────────────────────┐
│                              COMMANDS                                        │
├─────────────────────────────────────────────────────────────────────────────┤
│  products                   List the catalog                                │
│  add <slug> [tier] [qty]    Add to cart (tier: 100g/200g/500g/1kg or 0-3)   │
│  cart                       Show cart                                       │
│  inc <id> / dec <id>        Change quantity by one                          │
│  set <id> <qty>             Set quantity (0 removes the line)               │
│  rm <id>                    Remove line                                     │
│  clear                      Empty the cart                                  │
├─────────────────────────────────────────────────────────────────────────────┤
│  checkout                   Enter shipping details and place the order      │
│  pay                        Pay on the mock gateway                         │
│  status                     Poll payment status                             │
│  retry                      New payment after a failed/canceled one         │
│  resume                     Confirmation page for the last order            │
├─────────────────────────────────────────────────────────────────────────────┤
│  help                       Show this help                                  │
│  quit                       Exit                                            │
└─────────────────────────────────────────────────────────────────────────────┘
"""

FORM_FIELDS = (
    ("first_name", "First name"),
    ("last_name", "Last name"),
    ("email", "Email"),
    ("phone", "Phone"),
    ("address", "Address"),
    ("city", "City"),
    ("postal_code", "Postal code"),
    ("country", "Country [Russia]"),
    ("notes", "Notes (optional)"),
)


def print_help() -> None:
    print(HELP_TEXT)


# ═══════════════════════════════════════════════════════════════════════════════
# Session
# ═══════════════════════════════════════════════════════════════════════════════

class Session:
    """Everything one "tab" holds."""

    def __init__(
        self,
        settings: Settings,
        client: StorefrontClient,
        storage: Storage,
        ledger: CartLedger,
    ) -> None:
        self.settings = settings
        self.client = client
        self.storage = storage
        self.ledger = ledger
        self.correlation = CorrelationRecord(storage)
        self.policy = Policy.from_settings(settings)
        self.tracker = PaymentTracker(client, self.correlation, self.policy)
        self.orchestrator: CheckoutOrchestrator | None = None

    def new_orchestrator(self) -> CheckoutOrchestrator:
        self.orchestrator = CheckoutOrchestrator(
            self.ledger,
            Reconciler(self.client, self.policy),
            self.client,
            self.correlation,
            self.settings,
            lease=CheckoutLease(self.storage) if self.settings.checkout_lease else None,
        )
        return self.orchestrator


# ═══════════════════════════════════════════════════════════════════════════════
# Display
# ═══════════════════════════════════════════════════════════════════════════════

def print_cart(ledger: CartLedger) -> None:
    if ledger.is_empty():
        print("  Cart is empty.")
        return
    print()
    for line in ledger:
        total = P.format_price(line.total_cents)
        print(f"  {line.composite_id:24} {line.title:36} x{line.quantity:<3} {total:>14}")
    print(f"  {'':24} {'Total (' + str(ledger.count()) + ' items)':36} {'':4} "
          f"{P.format_price(ledger.total_cents()):>14}")


def print_outcome(outcome: CheckoutOutcome) -> None:
    if outcome.duplicate:
        print(f"  Already in progress ({outcome.state.value}); nothing sent.")
    if outcome.order:
        print(f"  Order #{outcome.order.id}  {P.format_price(outcome.order.amount_cents)}")
    if outcome.payment:
        status = outcome.payment_status.value if outcome.payment_status else "?"
        print(f"  Payment {outcome.payment.payment_id}: {status}")
    if outcome.notice:
        print(f"  {outcome.notice}")
    if outcome.redirect_url:
        print(f"  → {outcome.redirect_url}")


# ═══════════════════════════════════════════════════════════════════════════════
# Commands
# ═══════════════════════════════════════════════════════════════════════════════

async def cmd_products(session: Session) -> None:
    match await session.client.list_products():
        case Ok(products):
            print()
            for p in products:
                stock = "" if p.in_stock else "  (out of stock)"
                print(f"  {p.slug:20} {p.title:36} {P.format_price(p.price_cents, p.currency):>14}{stock}")
        case Error(e):
            print(f"  ✗ Catalog unavailable: {e.message}")


def parse_tier(raw: str | None) -> P.VariantTier:
    if raw is None:
        return P.tier_at(P.DEFAULT_TIER_INDEX)
    if raw.isdigit():
        return P.tier_at(int(raw))
    return P.tier_by_label(raw)


async def cmd_add(session: Session, args: list[str]) -> None:
    if not args:
        print("  Usage: add <slug> [tier] [qty]")
        return
    try:
        tier = parse_tier(args[1] if len(args) > 1 else None)
        quantity = int(args[2]) if len(args) > 2 else 1
    except (IndexError, KeyError, ValueError):
        print("  ✗ tier must be one of: " + ", ".join(t.label for t in P.WEIGHT_TIERS) + "; qty a number")
        return

    match await session.client.product_by_slug(args[0]):
        case Ok(None):
            print(f"  ✗ No product '{args[0]}'")
        case Ok(product):
            offer = P.offer_for(product, tier)
            try:
                await session.ledger.add(offer, quantity)
            except ValueError as e:
                print(f"  ✗ {e}")
                return
            print(f"  + {offer.title} x{quantity}  ({P.format_price(offer.unit_price_cents)} each)")
        case Error(e):
            print(f"  ✗ Catalog unavailable: {e.message}")


def prompt_form() -> ShippingForm:
    values: dict[str, str] = {}
    for name, label in FORM_FIELDS:
        values[name] = input(f"  {label}: ").strip()
    return ShippingForm(
        first_name=values["first_name"],
        last_name=values["last_name"],
        email=values["email"],
        phone=values["phone"],
        address=values["address"],
        city=values["city"],
        postal_code=values["postal_code"],
        country=values["country"] or "Russia",
        notes=values["notes"] or None,
    )


async def cmd_checkout(session: Session) -> None:
    orchestrator = session.orchestrator
    if orchestrator is None or orchestrator.state.order_exists:
        orchestrator = session.new_orchestrator()

    if session.ledger.is_empty():
        print("  ✗ Your cart is empty")
        return
    print_cart(session.ledger)
    form = prompt_form()

    match await orchestrator.submit(form):
        case Ok(outcome):
            print_outcome(outcome)
        case Error(e):
            print(f"  ✗ {e.message}")
            for name, problem in e.fields.items():
                print(f"    {name}: {problem}")


async def cmd_payment(session: Session, action: str) -> None:
    orchestrator = session.orchestrator
    if orchestrator is None or orchestrator.state is CheckoutState.IDLE:
        print("  ✗ No checkout in this session; try 'resume'")
        return

    match action:
        case "pay":
            result = await orchestrator.complete_payment()
        case "status":
            result = await orchestrator.refresh_payment()
        case _:
            result = await orchestrator.retry_payment()

    match result:
        case Ok(outcome):
            print_outcome(outcome)
        case Error(e):
            print(f"  ✗ {e.message}")


async def cmd_resume(session: Session, args: list[str]) -> None:
    try:
        order_id = int(args[0]) if args else None
    except ValueError:
        print("  ✗ order id must be a number")
        return

    match await session.tracker.resume(order_id):
        case Ok(tracked):
            print(f"  Order #{tracked.order.id}  {P.format_price(tracked.order.amount_cents)}  [{tracked.order.status}]")
            print(f"  Payment {tracked.payment_id or '-'}: {tracked.status.value}")
        case Error(e):
            print(f"  ✗ {e.message}")


async def cmd_set(ledger: CartLedger, args: list[str]) -> None:
    try:
        quantity = int(args[1])
    except ValueError:
        print("  ✗ qty must be a number")
        return
    await ledger.set_quantity(args[0], quantity)
    print_cart(ledger)


# ═══════════════════════════════════════════════════════════════════════════════
# Main
# ═══════════════════════════════════════════════════════════════════════════════

async def run_cli(settings: Settings) -> None:
    session_factory, engine = await create_storage_database(settings.storage_url)
    add_context(tab=uuid.uuid4().hex[:8])
    try:
        storage = SQLAlchemyStorage(session_factory)
        ledger = await CartLedger.load(storage)

        async with httpx.AsyncClient(base_url=settings.api_base_url, timeout=settings.request_timeout) as http:
            session = Session(settings, StorefrontClient(http), storage, ledger)
            await repl(session)
    finally:
        clear_context()
        await engine.dispose()


async def repl(session: Session) -> None:
    ledger = session.ledger
    print_help()
    if not ledger.is_empty():
        print(f"  Restored cart: {ledger.count()} item(s)")

    while True:
        try:
            line = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            break

        if not line:
            continue

        cmd, *args = line.split()

        match cmd.lower():
            case "quit" | "exit" | "q":
                print("Bye!")
                break
            case "help" | "h" | "?":
                print_help()
            case "products":
                await cmd_products(session)
            case "add":
                await cmd_add(session, args)
            case "cart":
                print_cart(ledger)
            case "inc" | "dec" | "rm" if len(args) != 1:
                print(f"  Usage: {cmd} <id>")
            case "inc":
                await ledger.increment(args[0])
                print_cart(ledger)
            case "dec":
                await ledger.decrement(args[0])
                print_cart(ledger)
            case "rm":
                await ledger.remove(args[0])
                print_cart(ledger)
            case "set" if len(args) != 2:
                print("  Usage: set <id> <qty>")
            case "set":
                await cmd_set(ledger, args)
            case "clear":
                await ledger.clear()
                print("  Cart cleared.")
            case "checkout":
                await cmd_checkout(session)
            case "pay" | "status" | "retry":
                await cmd_payment(session, cmd.lower())
            case "resume":
                await cmd_resume(session, args)
            case _:
                print(f"  ✗ Unknown command: {cmd}")
                print("  Type 'help' for available commands.")


def main() -> None:
    settings = load_settings()
    configure_logging(settings.log_level, settings.log_json)
    asyncio.run(run_cli(settings))


if __name__ == "__main__":
    main()
