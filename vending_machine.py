from abc import ABC, abstractmethod
from typing import List, Optional, Dict, Callable
from dataclasses import dataclass


# ==================== Errors ====================

class VendingMachineError(Exception):
    """Base class for errors a customer can recover from"""
    pass


class NoCreditError(VendingMachineError):
    """Product selected before any coin was inserted"""
    pass


class InsufficientCreditError(VendingMachineError):
    """Credit is lower than the price of the selected product"""
    pass


class OutOfStockError(VendingMachineError):
    """Selected product has no items left"""
    pass


class MachineOutOfStockError(VendingMachineError):
    """Machine has run out of every product"""
    pass


# ==================== Core Models ====================

def _require_int(value, label: str) -> None:
    # bool is an int subclass but never a valid amount
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{label} must be an integer, got {value!r}")


@dataclass(frozen=True)
class Coin:
    """Represents a coin denomination, value in the smallest currency unit"""
    name: str
    value: int

    def __post_init__(self):
        _require_int(self.value, "Coin value")
        if self.value <= 0:
            raise ValueError(f"Coin value must be positive, got {self.value}")


@dataclass(frozen=True)
class Product:
    """Represents a product sold by the machine, identified by its name"""
    name: str
    value: int

    def __post_init__(self):
        _require_int(self.value, "Product price")
        if self.value <= 0:
            raise ValueError(f"Product price must be positive, got {self.value}")

    def __repr__(self) -> str:
        return f"Product({self.name}, {self.value})"


@dataclass
class InventoryItem:
    """Number of items left for one product"""
    product: Product
    count: int

    def __post_init__(self):
        _require_int(self.count, f"Count for {self.product.name}")
        if self.count < 0:
            raise ValueError(f"Count for {self.product.name} cannot be negative")


class Inventory:
    """Products held by the machine, keyed by product name in stocking order"""

    def __init__(self, items: List[InventoryItem]):
        self._items: Dict[str, InventoryItem] = {}
        for item in items:
            name = item.product.name
            if name in self._items:
                raise ValueError(f"Duplicate inventory entry for {name}")
            # Own copy so the caller's snapshot stays untouched
            self._items[name] = InventoryItem(item.product, item.count)

    def get_count(self, product: Product) -> int:
        item = self._items.get(product.name)
        return item.count if item else 0

    def has_stock_of(self, product: Product) -> bool:
        return self.get_count(product) > 0

    def is_empty(self) -> bool:
        """True when every product has zero items left"""
        return all(item.count == 0 for item in self._items.values())

    def remove_one(self, product: Product) -> bool:
        """Take one item of the product out, False if there is none"""
        item = self._items.get(product.name)
        if not item or item.count == 0:
            return False
        item.count -= 1
        return True

    def get_items(self) -> List[InventoryItem]:
        return [InventoryItem(item.product, item.count) for item in self._items.values()]

    def __repr__(self) -> str:
        entries = ", ".join(f"{name}: {item.count}" for name, item in self._items.items())
        return f"Inventory({entries})"


@dataclass(frozen=True)
class TransitionEvent:
    """Emitted every time the machine changes state"""
    previous: Optional[str]
    current: str


# ==================== Context ====================

class VendingMachineContext:
    """
    Owns the credit and the inventory and holds the current state.
    Customer actions are handed to the current state, which calls back
    into the context to change credit, stock or state.
    """

    def __init__(self, inventory: List[InventoryItem],
                 listeners: Optional[List[Callable[[TransitionEvent], None]]] = None):
        self._credit = 0
        self._inventory = Inventory(inventory)
        self._state: Optional[VendingMachineState] = None
        # Registered before the first transition so they also see it
        self._listeners: List[Callable[[TransitionEvent], None]] = list(listeners or [])

        self.transition_to(InitialReadyState(self))

    # Operations used by the states
    def add_credit(self, amount: int) -> None:
        self._credit += amount
        print(f"[Machine] Credit is now {self._credit}")

    def reset_credit(self) -> None:
        self._credit = 0
        print("[Machine] Credit has been reset")

    def has_stock_of(self, product: Product) -> bool:
        return self._inventory.has_stock_of(product)

    def is_out_of_stock(self) -> bool:
        return self._inventory.is_empty()

    def dispense_product(self, product: Product) -> None:
        """
        Hand out one product and consume the credit.

        The price is taken from the product passed in; stock is matched by
        name only, so callers should select from the machine's own catalog.
        """
        if product.value > self._credit:
            raise InsufficientCreditError(
                f"You are trying to buy a product with price {product.value} "
                f"but your credit is only {self._credit}")
        if not self.has_stock_of(product):
            raise OutOfStockError(f"No {product.name} products left, select another one")

        self._inventory.remove_one(product)
        print(f"[Machine] Product {product.name} dispensed. {self._inventory}")
        self.reset_credit()

    def transition_to(self, state: 'VendingMachineState') -> None:
        if state.get_context() is not self:
            raise ValueError("State is bound to a different machine")

        previous = self.get_state_name() if self._state else None
        self._state = state
        event = TransitionEvent(previous=previous, current=self.get_state_name())

        print(f"[Machine] Transition to {event.current}")
        for listener in self._listeners:
            listener(event)

    def on_transition(self, callback: Callable[[TransitionEvent], None]) -> None:
        """Register a callback for state changes"""
        self._listeners.append(callback)

    # Public API methods
    def insert_coin(self, coin: Coin) -> None:
        self._state.insert_coin(coin)

    def select_product(self, product: Product) -> None:
        self._state.select_product(product)

    # Read-only views
    def get_credit(self) -> int:
        return self._credit

    def get_state(self) -> 'VendingMachineState':
        return self._state

    def get_state_name(self) -> str:
        return type(self._state).__name__

    def get_stock(self, product: Product) -> int:
        return self._inventory.get_count(product)

    def get_inventory(self) -> List[InventoryItem]:
        return self._inventory.get_items()

    def display_inventory(self) -> None:
        """Display current inventory"""
        print(f"\n{'='*60}")
        print(f"VENDING MACHINE INVENTORY - {self.get_state_name()}")
        print(f"{'='*60}")

        for item in self._inventory.get_items():
            status = "✓" if item.count > 0 else "✗"
            print(f"{status} {item.product.name} - {item.product.value} ({item.count} left)")

        print(f"\nCredit: {self._credit}")
        print(f"{'='*60}\n")


# ==================== State Pattern: Vending Machine States ====================

class VendingMachineState(ABC):
    """
    A mode of the machine. Every state handles both customer actions,
    possibly by failing, and only touches the machine through its context.
    """

    def __init__(self, context: VendingMachineContext):
        self._context = context

    def get_context(self) -> VendingMachineContext:
        return self._context

    @abstractmethod
    def insert_coin(self, coin: Coin) -> None:
        """Handle coin insertion"""
        pass

    @abstractmethod
    def select_product(self, product: Product) -> None:
        """Handle product selection"""
        pass


class InitialReadyState(VendingMachineState):
    """Waiting for the first coin"""

    def insert_coin(self, coin: Coin) -> None:
        self._context.add_credit(coin.value)
        self._context.transition_to(TransactionStartedState(self._context))

    def select_product(self, product: Product) -> None:
        raise NoCreditError("You should insert coins before selecting the product")


class TransactionStartedState(VendingMachineState):
    """Accumulating credit until a product is bought"""

    def insert_coin(self, coin: Coin) -> None:
        self._context.add_credit(coin.value)

    def select_product(self, product: Product) -> None:
        # Errors leave the machine in this state with its credit
        self._context.dispense_product(product)

        if self._context.is_out_of_stock():
            self._context.transition_to(OutOfStockState(self._context))
        else:
            self._context.transition_to(InitialReadyState(self._context))


class OutOfStockState(VendingMachineState):
    """Terminal: every product is sold out"""

    def insert_coin(self, coin: Coin) -> None:
        raise MachineOutOfStockError("Stop inserting coins, we completely ran out of stock")

    def select_product(self, product: Product) -> None:
        raise MachineOutOfStockError("Stop selecting products, we completely ran out of stock")


# ==================== Catalog ====================

SODA = Product(name="Soda", value=15)
NUTS = Product(name="Nuts", value=25)

NICKEL = Coin(name="nickel", value=5)
DIME = Coin(name="dime", value=10)


def initial_inventory() -> List[InventoryItem]:
    """Stock the demo machine starts with"""
    return [
        InventoryItem(SODA, 2),
        InventoryItem(NUTS, 0),
    ]


# ==================== Demo Usage ====================

def main():
    """Demo the vending machine"""
    print("=== Vending Machine State Demo ===\n")

    machine = VendingMachineContext(initial_inventory())
    machine.display_inventory()

    def attempt(action, *args):
        try:
            action(*args)
        except VendingMachineError as e:
            print(f"[Customer] {e}")

    print("--- Selecting without credit ---")
    attempt(machine.select_product, NUTS)

    print("\n--- Not enough credit for Soda ---")
    attempt(machine.insert_coin, DIME)
    attempt(machine.select_product, SODA)

    print("\n--- Topping up and buying Soda ---")
    attempt(machine.insert_coin, NICKEL)
    attempt(machine.select_product, SODA)

    print("\n--- Buying the last Soda ---")
    attempt(machine.insert_coin, DIME)
    attempt(machine.insert_coin, NICKEL)
    attempt(machine.select_product, SODA)

    print("\n--- Inserting into an empty machine ---")
    attempt(machine.insert_coin, NICKEL)

    machine.display_inventory()
    print("=== Demo Complete ===")


if __name__ == "__main__":
    main()


# State Transitions:
# InitialReady --insert_coin--> TransactionStarted
# TransactionStarted --insert_coin--> TransactionStarted (credit accumulates)
# TransactionStarted --select_product, stock left--> InitialReady
# TransactionStarted --select_product, all sold out--> OutOfStock
# TransactionStarted --select_product fails--> TransactionStarted
# OutOfStock: no way out

# Credit Rules:
# Price equal to credit is enough
# A successful purchase resets credit to 0, overpayment is kept by the machine
# Sold-out products do not block buying other products
