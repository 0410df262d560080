"""Customization state for a single menu item.

An :class:`OptionSelection` is opened for one menu item, mutated while the
customer picks choices and finally turned into a cart line. Nothing is
persisted until the line is added to the cart.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Mapping, Sequence

from ..domain.catalog import MenuOption, SelectionType
from ..pricing.engine import line_unit_price


@dataclass(frozen=True)
class MissingOption:
    """A required option without a selection."""

    option_id: str
    label: str

    def as_dict(self) -> dict:
        return {"option_id": self.option_id, "label": self.label}


def is_required(option: MenuOption) -> bool:
    return option.is_required or option.selection_type is SelectionType.SINGLE_REQUIRED


class OptionSelection:
    """Track the chosen option items per option group.

    Parameters
    ----------
    options:
        Option groups of the menu item.
    selections:
        Optional initial state, e.g. restored from a cart line. Unknown or
        unavailable entries are dropped and cardinality limits are enforced.
    with_defaults:
        Pre-select the first available item of every ``single_required``
        option that has no selection yet.
    """

    def __init__(
        self,
        options: Sequence[MenuOption],
        selections: Mapping[str, Iterable[str]] | None = None,
        *,
        with_defaults: bool = False,
    ) -> None:
        self.options = list(options)
        self._by_id = {opt.id: opt for opt in self.options}
        self._selected: dict[str, list[str]] = {opt.id: [] for opt in self.options}
        for option_id, item_ids in (selections or {}).items():
            for item_id in item_ids:
                self.select(option_id, item_id, toggle=False)
        if with_defaults:
            for opt in self.options:
                if opt.selection_type is SelectionType.SINGLE_REQUIRED and not self._selected[opt.id]:
                    available = opt.available_items
                    if available:
                        self._selected[opt.id] = [available[0].id]

    def select(self, option_id: str, item_id: str, *, toggle: bool = True) -> bool:
        """Apply a selection and return ``True`` if the state changed.

        Single-choice options replace the current choice. Selecting the
        current choice of a ``single_optional`` option again clears it when
        ``toggle`` is set. ``multiple`` options toggle membership, refusing to
        grow past ``max_selections``.
        """

        option = self._by_id.get(option_id)
        if option is None:
            return False
        opt_item = option.item(item_id)
        if opt_item is None or not opt_item.is_available:
            return False
        current = self._selected[option_id]

        if option.selection_type.is_single:
            if current == [item_id]:
                if toggle and option.selection_type is SelectionType.SINGLE_OPTIONAL:
                    self._selected[option_id] = []
                    return True
                return False
            self._selected[option_id] = [item_id]
            return True

        if item_id in current:
            if not toggle:
                return False
            current.remove(item_id)
            return True
        if self._available_count(option) >= max(option.max_selections, 0):
            return False
        current.append(item_id)
        return True

    def deselect(self, option_id: str, item_id: str | None = None) -> bool:
        """Remove ``item_id`` (or every choice) from ``option_id``.

        ``single_required`` options cannot be cleared.
        """

        option = self._by_id.get(option_id)
        if option is None or option.selection_type is SelectionType.SINGLE_REQUIRED:
            return False
        current = self._selected[option_id]
        if item_id is None:
            changed = bool(current)
            self._selected[option_id] = []
            return changed
        if item_id in current:
            current.remove(item_id)
            return True
        return False

    def _available_count(self, option: MenuOption) -> int:
        count = 0
        for item_id in self._selected[option.id]:
            opt_item = option.item(item_id)
            if opt_item is not None and opt_item.is_available:
                count += 1
        return count

    def selected(self, option_id: str) -> list[str]:
        return list(self._selected.get(option_id, []))

    def as_dict(self) -> dict[str, list[str]]:
        """Return non-empty selections keyed by option id."""

        return {oid: list(ids) for oid, ids in self._selected.items() if ids}

    def missing_required(self) -> list[MissingOption]:
        return [
            MissingOption(option_id=opt.id, label=opt.label)
            for opt in self.options
            if is_required(opt) and not self._selected[opt.id]
        ]

    def is_complete(self) -> bool:
        return not self.missing_required()

    def unit_price(self, effective_price: Decimal) -> Decimal:
        """Return ``effective_price`` plus the selected option surcharges."""

        return line_unit_price(effective_price, self.options, self.as_dict())

    def resolved(self) -> list[dict]:
        """Return the human readable choices for snapshotting."""

        out: list[dict] = []
        for opt in self.options:
            for item_id in self._selected[opt.id]:
                opt_item = opt.item(item_id)
                if opt_item is None:
                    continue
                out.append(
                    {
                        "option": opt.label,
                        "choice": opt_item.name,
                        "additional_price": str(opt_item.additional_price),
                    }
                )
        return out
