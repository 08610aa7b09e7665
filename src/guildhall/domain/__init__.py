"""Rules layer for the guild simulation.

This package holds everything that changes campaign state.  It exposes:

* Dataclasses describing every game entity (see :mod:`models`).
* Enumerations and strongly-typed identifiers used across the rules layer.
* Balance tables (see :mod:`rules_config`).
* Rule functions for quests, resolution, leveling, finances, the roster and
  the weekly tick.

Everything operates purely in-memory; persistence goes through
:mod:`guildhall.savegame` and :mod:`guildhall.repository`.
"""

from . import (
    enums,
    errors,
    events,
    execution,
    finances,
    leveling,
    models,
    quests,
    roster,
    rules_config,
    setup,
    tick,
)

__all__ = [
    "enums",
    "errors",
    "events",
    "execution",
    "finances",
    "leveling",
    "models",
    "quests",
    "roster",
    "rules_config",
    "setup",
    "tick",
]
