"""
Customer cart.

The cart is never stored in a table. It lives in the session under a key per
profile, is loaded into a ``Cart`` at the start of a request, handed
explicitly to whatever needs it, and written back with ``save``.
"""

from decimal import Decimal

from .utils import to_money


class CartLine:
    """One menu item in the cart with its quantity"""

    def __init__(self, menu_item_id, name, price, quantity=1):
        self.menu_item_id = str(menu_item_id)
        self.name = name
        self.price = to_money(price)
        self.quantity = int(quantity)

    @property
    def line_total(self):
        return self.price * self.quantity

    def to_dict(self):
        return {
            'menu_item_id': self.menu_item_id,
            'name': self.name,
            'price': str(self.price),
            'quantity': self.quantity,
        }

    def __repr__(self):
        return f"CartLine({self.name!r}, {self.price}, x{self.quantity})"


class Cart:
    SESSION_KEY = 'cart'

    def __init__(self, lines=None):
        self._lines = {}
        for line in lines or []:
            if line.quantity > 0:
                self._lines[line.menu_item_id] = line

    @classmethod
    def session_key(cls, owner):
        return f"{cls.SESSION_KEY}:{owner.pk}"

    @classmethod
    def from_session(cls, session, owner):
        stored = session.get(cls.session_key(owner)) or []
        return cls([
            CartLine(row['menu_item_id'], row['name'], row['price'], row['quantity'])
            for row in stored
        ])

    def save(self, session, owner):
        session[self.session_key(owner)] = [line.to_dict() for line in self]

    def add(self, menu_item):
        """Add one unit of ``menu_item``; a new line starts at quantity 1"""
        key = str(menu_item.id)
        line = self._lines.get(key)
        if line:
            line.quantity += 1
        else:
            line = CartLine(menu_item.id, menu_item.name, menu_item.price, 1)
            self._lines[key] = line
        return line

    def change_quantity(self, menu_item_id, delta):
        """
        Move a line's quantity by ``delta``. A line that drops to zero or
        below is removed and ``None`` is returned.
        """
        key = str(menu_item_id)
        line = self._lines[key]
        quantity = line.quantity + int(delta)
        if quantity <= 0:
            del self._lines[key]
            return None
        line.quantity = quantity
        return line

    def remove(self, menu_item_id):
        del self._lines[str(menu_item_id)]

    def clear(self):
        self._lines.clear()

    def quantity_of(self, menu_item_id):
        line = self._lines.get(str(menu_item_id))
        return line.quantity if line else 0

    @property
    def total(self):
        return sum((line.line_total for line in self), Decimal('0.00'))

    def is_empty(self):
        return not self._lines

    def __iter__(self):
        return iter(list(self._lines.values()))

    def __len__(self):
        return len(self._lines)

    def __contains__(self, menu_item_id):
        return str(menu_item_id) in self._lines
