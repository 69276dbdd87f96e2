"""Sample catalog: a slice of the IdleLoops action list (towns 1-3)."""
from __future__ import annotations

import math

from loopforecast.action import LoopDef, LoopEffects
from loopforecast.catalog import ActionCatalog, ForecastConfig, build_catalog
from loopforecast.host import DungeonFloor, HostContext
from loopforecast.requirement import Req

STAT_NAMES = ["Dex", "Str", "Con", "Spd", "Per", "Cha", "Int", "Luck", "Soul"]

# Repetitions that still pay out, per action, as the host's towns report them.
GOOD = {
    "Smash Pots": 30,
    "Pick Locks": 10,
    "Short Quest": 5,
    "Long Quest": 2,
    "Wild Mana": 10,
    "Gather Herbs": 20,
    "Hunt": 8,
}


def level_from_exp(exp: float) -> int:
    return math.floor((math.sqrt(8 * exp / 100 + 1) - 1) / 2)


def skill_level_from_exp(exp: float) -> int:
    return math.floor((math.sqrt(8 * exp / 100 + 1) - 1) / 2)


def fibonacci(n: int) -> int:
    """fibonacci(0) == fibonacci(1) == 1, as the game counts it."""
    a, b = 1, 0
    while n >= 0:
        a, b = a + b, a
        n -= 1
    return b


def precision3(value: float) -> float:
    return float(f"{value:.3g}")


def guild_rank_bonus(guild: float) -> float:
    if math.floor(guild / 3 + 0.00001) >= 14:
        return math.floor(1 + 2.25 + (45 ** 2) / 300)
    return precision3(1 + guild / 20 + (guild ** 2) / 300)


def define_host() -> HostContext:
    return HostContext(
        stat_names=list(STAT_NAMES),
        skills={
            "Combat": 2_500,
            "Magic": 10_000,
            "Alchemy": 0,
            "Crafting": 0,
            "Dark": 0,
            "Chronomancy": 0,
            "Practical": 0,
            "Pyromancy": 0,
        },
        level_from_exp=level_from_exp,
        skill_level_from_exp=skill_level_from_exp,
        bonus_multiplier=lambda stat: 1.0,
        historical_totals={"Heal The Sick": 12, "Fight Monsters": 30},
        dungeons=[[DungeonFloor(completed=n) for n in (40, 12, 3, 0, 0, 0, 0)]],
        buffs={"Ritual": 0},
    )


def _metadata(name: str) -> dict | None:
    return METADATA.get(name)


def gain(resource: str, amount: float):
    def effect(r, k):
        r[resource] += amount

    return effect


def flag(resource: str):
    def effect(r, k):
        r[resource] = True

    return effect


def train(skill: str, amount: float):
    def effect(r, k):
        k[skill] += amount

    return effect


def both(*effects):
    def effect(r, k):
        for e in effects:
            e(r, k)

    return effect


def _counted(name: str, slot: str, payout):
    """Effect that only pays out for the first GOOD[name] repetitions."""
    counter = f"_{slot}_count"

    def effect(r, k):
        r[counter] += 1
        if r[counter] <= GOOD[name]:
            payout(r, k)

    return effect


METADATA: dict[str, dict] = {
    "Wander": {"stat_cost": {"Per": 0.2, "Con": 0.2, "Cha": 0.2, "Spd": 0.3, "Luck": 0.1}, "mana_cost": lambda: 250},
    "Smash Pots": {"stat_cost": {"Str": 0.2, "Per": 0.2, "Spd": 0.6}, "mana_cost": lambda: 50},
    "Pick Locks": {"stat_cost": {"Dex": 0.5, "Per": 0.3, "Spd": 0.1, "Luck": 0.1}, "mana_cost": lambda: 400},
    "Buy Glasses": {"stat_cost": {"Cha": 0.7, "Spd": 0.3}, "mana_cost": lambda: 50},
    "Buy Mana": {"stat_cost": {"Cha": 0.7, "Int": 0.2, "Luck": 0.1}, "mana_cost": lambda: 100},
    "Meet People": {"stat_cost": {"Int": 0.1, "Cha": 0.8, "Soul": 0.1}, "mana_cost": lambda: 800},
    "Train Strength": {"stat_cost": {"Str": 0.8, "Con": 0.2}, "exp_multiplier": 4, "mana_cost": lambda: 2000},
    "Short Quest": {"stat_cost": {"Str": 0.2, "Dex": 0.1, "Cha": 0.3, "Spd": 0.2, "Luck": 0.1, "Soul": 0.1}, "mana_cost": lambda: 600},
    "Long Quest": {"stat_cost": {"Str": 0.2, "Int": 0.2, "Con": 0.4, "Spd": 0.2}, "mana_cost": lambda: 2000},
    "Throw Party": {"stat_cost": {"Cha": 0.8, "Soul": 0.2}, "mana_cost": lambda: 1600},
    "Warrior Lessons": {"stat_cost": {"Str": 0.5, "Dex": 0.3, "Con": 0.2}, "exp_multiplier": 1.5, "mana_cost": lambda: 1000},
    "Mage Lessons": {"stat_cost": {"Int": 0.5, "Cha": 0.3, "Soul": 0.2}, "exp_multiplier": 1.5, "mana_cost": lambda: 1000},
    "Buy Supplies": {"stat_cost": {"Cha": 0.8, "Luck": 0.1, "Soul": 0.1}, "mana_cost": lambda: 200},
    "Haggle": {"stat_cost": {"Cha": 0.8, "Luck": 0.1, "Soul": 0.1}, "mana_cost": lambda: 100},
    "Start Journey": {"stat_cost": {"Con": 0.4, "Per": 0.3, "Spd": 0.3}, "mana_cost": lambda: 1000},
    "Wild Mana": {"stat_cost": {"Con": 0.2, "Int": 0.6, "Soul": 0.2}, "mana_cost": lambda: 150},
    "Gather Herbs": {"stat_cost": {"Str": 0.4, "Dex": 0.3, "Int": 0.3}, "mana_cost": lambda: 200},
    "Hunt": {"stat_cost": {"Str": 0.2, "Dex": 0.2, "Spd": 0.4, "Per": 0.2}, "mana_cost": lambda: 800},
    "Bird Watching": {"stat_cost": {"Per": 0.8, "Int": 0.2}, "exp_multiplier": 4, "mana_cost": lambda: 2000},
    "Learn Alchemy": {"stat_cost": {"Con": 0.3, "Per": 0.1, "Int": 0.6}, "exp_multiplier": 1.5, "mana_cost": lambda: 1000},
    "Gather Team": {"stat_cost": {"Per": 0.2, "Cha": 0.5, "Int": 0.2, "Luck": 0.1}, "mana_cost": lambda: 2000},
    "Craft Armor": {"stat_cost": {"Str": 0.1, "Dex": 0.3, "Con": 0.3, "Int": 0.3}, "mana_cost": lambda: 1000},
    "Heal The Sick": {"stat_cost": {"Per": 0.2, "Int": 0.2, "Cha": 0.2, "Soul": 0.4}, "mana_cost": lambda: 2500, "segments": 3, "loop_stats": ["Per", "Int", "Cha"]},
    "Fight Monsters": {"stat_cost": {"Str": 0.3, "Spd": 0.3, "Con": 0.3, "Luck": 0.1}, "mana_cost": lambda: 2000, "segments": 3, "loop_stats": ["Spd", "Spd", "Spd", "Str", "Str", "Str", "Con", "Con", "Con"]},
    "Adventure Guild": {"stat_cost": {"Str": 0.4, "Dex": 0.3, "Con": 0.3}, "mana_cost": lambda: 3000, "segments": 3, "loop_stats": ["Str", "Dex", "Con"]},
    "Small Dungeon": {"stat_cost": {"Str": 0.1, "Dex": 0.4, "Con": 0.3, "Cha": 0.1, "Luck": 0.1}, "mana_cost": lambda: 2000, "segments": 7, "loop_stats": ["Dex", "Con", "Dex", "Cha", "Dex", "Str", "Luck"], "dungeon": 0},
}


def define_catalog(host: HostContext | None = None) -> ActionCatalog:
    host = host or define_host()
    sk = host.skill_level_from_exp
    lv = host.level_from_exp

    def self_combat(r, k) -> float:
        return (sk(k["combat"]) + sk(k["pyromancy"]) * 5) * (
            1 + (r["armor"] * guild_rank_bonus(r["crafts"])) / 5
        )

    def stat_bonus(p, a, s, offset) -> float:
        return 1 + lv(s[a.loop_stat(p, offset)]) / 100

    def buy_supplies(r, k):
        r["gold"] -= 300 - max(r["supplyDiscount"] * 20, 0)
        r["supplies"] += 1

    def haggle(r, k):
        r["rep"] -= 1
        r["supplyDiscount"] = 15 if r["supplyDiscount"] >= 15 else r["supplyDiscount"] + 1

    def buy_mana(r, k):
        r["mana"] += r["gold"] * 50
        r["gold"] = 0

    def gather_team(r, k):
        r["team"] += 1
        r["gold"] -= r["team"] * 200

    def mage_lessons(r, k):
        k["magic"] += 100 * (1 + sk(k["alchemy"]) / 100)

    def learn_alchemy(r, k):
        r["herbs"] -= 10
        k["alchemy"] += 50
        k["magic"] += 50

    def craft_armor(r, k):
        r["hide"] -= 2
        r["armor"] += 1

    def small_dungeon_tick(p, a, s, k, r):
        floors = host.dungeon(a.dungeon)
        floor = p.loops_done(a.segments)

        def progress(offset):
            if floor >= len(floors):
                return 0
            return (
                (self_combat(r, k) + sk(k["magic"]))
                * stat_bonus(p, a, s, offset)
                * math.sqrt(1 + floors[floor].completed / 200)
            )

        return progress

    def loop_bonus(p, per: float) -> float:
        return math.sqrt(1 + p.total_loops / per)

    behaviours = {
        "Wander": {},
        "Smash Pots": {
            "affected": ["mana"],
            "effect": _counted("Smash Pots", "pots", gain("mana", 100)),
        },
        "Pick Locks": {
            "affected": ["gold"],
            "effect": _counted("Pick Locks", "locks", gain("gold", 10)),
        },
        "Buy Glasses": {"effect": both(gain("gold", -10), flag("glasses"))},
        "Buy Mana": {"affected": ["mana", "gold"], "effect": buy_mana},
        "Meet People": {},
        "Train Strength": {},
        "Short Quest": {
            "affected": ["gold"],
            "effect": _counted("Short Quest", "squests", gain("gold", 20)),
        },
        "Long Quest": {
            "affected": ["gold", "rep"],
            "effect": _counted("Long Quest", "lquests", both(gain("gold", 30), gain("rep", 1))),
        },
        "Throw Party": {"affected": ["rep"], "effect": gain("rep", -2)},
        "Warrior Lessons": {"effect": train("combat", 100)},
        "Mage Lessons": {"effect": mage_lessons},
        "Buy Supplies": {"affected": ["gold"], "effect": buy_supplies},
        "Haggle": {"affected": ["rep"], "can_start": Req.resource("rep", ">", 0), "effect": haggle},
        "Start Journey": {"effect": both(gain("supplies", -1), gain("town", 1))},
        "Wild Mana": {
            "affected": ["mana"],
            "effect": _counted("Wild Mana", "wildmana", gain("mana", 250)),
        },
        "Gather Herbs": {
            "affected": ["herbs"],
            "effect": _counted("Gather Herbs", "herbs", gain("herbs", 1)),
        },
        "Hunt": {
            "affected": ["hide"],
            "effect": _counted("Hunt", "hunt", gain("hide", 1)),
        },
        "Bird Watching": {"can_start": Req.has("glasses")},
        "Learn Alchemy": {
            "affected": ["herbs"],
            "can_start": Req.resource("herbs", ">=", 10),
            "effect": learn_alchemy,
        },
        "Gather Team": {"affected": ["gold"], "effect": gather_team},
        "Craft Armor": {
            "affected": ["hide"],
            "can_start": Req.resource("hide", ">=", 2),
            "effect": craft_armor,
        },
        "Heal The Sick": {
            "affected": ["rep"],
            "can_start": Req.resource("rep", ">=", 1),
            "loop": LoopDef(
                cost=lambda p, a: lambda segment: fibonacci(
                    2 + math.floor((p.completed + segment) / a.segments + 0.0000001)
                ) * 5000,
                tick=lambda p, a, s, k, r: lambda offset: (
                    sk(k["magic"]) * loop_bonus(p, 100) * stat_bonus(p, a, s, offset)
                ),
                effects=LoopEffects(end=train("magic", 10), loop=gain("rep", 3)),
            ),
        },
        "Fight Monsters": {
            "affected": ["gold"],
            "can_start": Req.resource("rep", ">=", 2),
            "loop": LoopDef(
                cost=lambda p, a: lambda segment: fibonacci(
                    math.floor((p.completed + segment) - p.completed / a.segments + 0.0000001)
                ) * 10000,
                tick=lambda p, a, s, k, r: lambda offset: (
                    self_combat(r, k) * loop_bonus(p, 100) * stat_bonus(p, a, s, offset)
                ),
                effects=LoopEffects(end=train("combat", 10), segment=gain("gold", 20)),
            ),
        },
        "Adventure Guild": {
            "affected": ["gold", "adventures"],
            # Members are paid continuously, not per repetition
            "mana_offset": lambda r: r["adventures"] * 200,
            "loop": LoopDef(
                cost=lambda p, a: lambda segment: precision3(1.2 ** (p.completed + segment)) * 5e6,
                tick=lambda p, a, s, k, r: lambda offset: (
                    (self_combat(r, k) + sk(k["magic"]) / 2)
                    * stat_bonus(p, a, s, offset)
                    * loop_bonus(p, 1000)
                ),
                effects=LoopEffects(segment=both(gain("mana", 200), gain("adventures", 1))),
            ),
        },
        "Small Dungeon": {
            "affected": ["soul"],
            "loop": LoopDef(
                max_loops=lambda a: len(host.dungeon(a.dungeon)),
                cost=lambda p, a: lambda segment: precision3(
                    2 ** math.floor((p.completed + segment) / a.segments + 0.0000001) * 15000
                ),
                tick=small_dungeon_tick,
                effects=LoopEffects(
                    end=both(train("combat", 5), train("magic", 5)),
                    loop=gain("soul", 1),
                ),
            ),
        },
    }

    return build_catalog(
        behaviours,
        _metadata,
        ForecastConfig(name="IdleLoops (sample)"),
    )
