"""
HackReg Backend - Registration Challenge Generator
====================================================

What:  Produces a fresh alliance puzzle: weighted people, alliance edges
       between them, and the hidden target sum.
How:   The puzzle is built backwards from its answer. A solution is drawn
       first, the roster is split into groups, each group gets a target sum
       (the solution itself for one hidden group, something strictly smaller
       for every other), and only then are per-person weights derived from
       those targets. Weights must never be generated first and summed.
Who:   Called by ChallengeService the first time a user asks for a puzzle.
When:  Inline in the request; bounded loops over a fixed roster, no I/O.

Generation Steps:
    1. solution        uniform in [SOLUTION_FLOOR, SOLUTION_FLOOR + SOLUTION_SPAN)
    2. partition       one large group, one group of five, triples, pairs, singletons
    3. solution group  one group picked at random
    4. targets         solution for that group, solution - offset for the rest
    5. weights         even split, balanced perturbation, drift fix on first member
    6. alliances       connectivity skeleton + ~90% of remaining intra-group pairs
    7. dedupe          unordered pairs, no self-loops
    8. shuffle         people order, edge order and edge orientation

Output order leaks nothing: people and alliances are shuffled and every edge
is flipped at random, so neither reveals the generation sequence.
"""

import random
from dataclasses import dataclass
from itertools import combinations
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

Edge = Tuple[str, str]

# ── Roster ────────────────────────────────────────────────────────────────
ROSTER: Tuple[str, ...] = (
    "Abigail", "Arjun", "Beatrix", "Bruno", "Calliope", "Cyrus", "Dahlia", "Dmitri",
    "Elowen", "Ezra", "Fiona", "Felix", "Greta", "Gideon", "Hazel", "Hugo",
    "Ingrid", "Ivan", "Juniper", "Jasper", "Kiara", "Kofi", "Leona", "Lucian",
    "Marisol", "Milo", "Nadia", "Nikolai", "Odette", "Orion", "Priya", "Percival",
    "Quinn", "Rosalind", "Rafael", "Saoirse", "Silas", "Tamsin", "Tobias", "Ursula",
    "Viktor", "Wren", "Wolfgang", "Ximena", "Yusuf", "Yvette", "Zara", "Zephyr",
    "Amara", "Bastian",
)

# ── Tuning ────────────────────────────────────────────────────────────────
SOLUTION_FLOOR = 10_000_000
SOLUTION_SPAN = 90_000_000

# Non-solution groups target solution - randint(1, MAX_DECOY_OFFSET)
MAX_DECOY_OFFSET = 5_000_000

FIVE_GROUP_SIZE = 5
MAX_TRIPLE_GROUPS = 4
MAX_PAIR_GROUPS = 4

PERTURBATION_ROUNDS_PER_MEMBER = 10
MAX_PERTURBATION = 2_000_000

EXTRA_EDGE_PROBABILITY = 0.9


@dataclass(frozen=True)
class GeneratedChallenge:
    """
    Result of generate().

    solution_group is the in-memory answer key for callers that need to
    verify a puzzle (tests, tooling). It is never persisted or serialized.
    """
    people: Dict[str, int]
    alliances: List[Edge]
    solution: int
    solution_group: Tuple[str, ...]


def partition_roster(names: Sequence[str], rng: random.Random) -> List[List[str]]:
    """
    Shuffle ``names`` and carve them into groups of mixed sizes.

    Order of carving: one large group (a quarter to a half of the roster),
    one group of five, up to four triples, up to four pairs, then every
    leftover name as a singleton. Each name lands in exactly one group.
    """
    remaining = list(names)
    rng.shuffle(remaining)
    groups: List[List[str]] = []

    def take(size: int) -> None:
        groups.append(remaining[:size])
        del remaining[:size]

    large = rng.randint(len(remaining) // 4, len(remaining) // 2)
    if large:
        take(large)

    if len(remaining) >= FIVE_GROUP_SIZE:
        take(FIVE_GROUP_SIZE)

    for size, limit in ((3, MAX_TRIPLE_GROUPS), (2, MAX_PAIR_GROUPS)):
        for _ in range(limit):
            if len(remaining) < size:
                break
            take(size)

    while remaining:
        take(1)

    return groups


def distribute_weights(
    members: Sequence[str], target: int, rng: random.Random
) -> Dict[str, int]:
    """
    Split ``target`` across ``members`` as integer weights that sum to it exactly.

    Starts from a floored even split, then runs balanced transfers between
    two distinct members (the group sum is unchanged by each). Whatever the
    floor lost is added to the first member at the end, which can leave that
    member noticeably off the even split.
    """
    share = target // len(members)
    weights = {name: share for name in members}

    if len(members) > 1:
        for _ in range(PERTURBATION_ROUNDS_PER_MEMBER * len(members)):
            giver, taker = rng.sample(list(members), 2)
            amount = rng.randint(0, MAX_PERTURBATION)
            weights[giver] -= amount
            weights[taker] += amount

    weights[members[0]] += target - sum(weights.values())
    return weights


def skeleton_edges(members: Sequence[str]) -> List[Edge]:
    """
    Minimal edges that make every member of a group reachable.

    1 member: none. 2: one edge. 3: a path. 4: a cycle. 5: a fixed
    five-edge pattern. 6 or more: members in strides of three, where each
    stride head links to the next two members and to the next stride head.
    """
    m = list(members)
    n = len(m)
    if n <= 1:
        return []
    if n == 2:
        return [(m[0], m[1])]
    if n == 3:
        return [(m[0], m[1]), (m[1], m[2])]
    if n == 4:
        return [(m[0], m[1]), (m[1], m[2]), (m[2], m[3]), (m[3], m[0])]
    if n == 5:
        return [(m[0], m[1]), (m[0], m[2]), (m[1], m[3]), (m[2], m[4]), (m[3], m[4])]

    edges: List[Edge] = []
    for head in range(0, n, 3):
        for offset in (1, 2, 3):
            if head + offset < n:
                edges.append((m[head], m[head + offset]))
    return edges


def build_alliances(members: Sequence[str], rng: random.Random) -> List[Edge]:
    """Skeleton edges for the group plus random extra intra-group edges."""
    edges = skeleton_edges(members)
    for a, b in combinations(members, 2):
        if rng.random() < EXTRA_EDGE_PROBABILITY:
            edges.append((a, b))
    return edges


def dedupe_alliances(edges: Iterable[Edge]) -> List[Edge]:
    """Drop self-loops and repeated edges; (a, b) and (b, a) are the same edge."""
    seen = set()
    unique: List[Edge] = []
    for a, b in edges:
        if a == b:
            continue
        key = frozenset((a, b))
        if key in seen:
            continue
        seen.add(key)
        unique.append((a, b))
    return unique


def generate(rng: Optional[random.Random] = None) -> GeneratedChallenge:
    """
    Generate a new registration challenge.

    Args:
        rng: Randomness source. Defaults to ``random.SystemRandom`` so puzzles
             cannot be predicted from a seed; tests pass a seeded Random.

    Returns:
        GeneratedChallenge whose solution_group weights sum to ``solution``
        and whose other groups each sum to strictly less.
    """
    rng = rng or random.SystemRandom()

    solution = SOLUTION_FLOOR + rng.randrange(SOLUTION_SPAN)
    groups = partition_roster(ROSTER, rng)
    solution_index = rng.randrange(len(groups))

    weights: Dict[str, int] = {}
    edges: List[Edge] = []
    for index, members in enumerate(groups):
        if index == solution_index:
            target = solution
        else:
            target = solution - rng.randint(1, MAX_DECOY_OFFSET)
        weights.update(distribute_weights(members, target, rng))
        edges.extend(build_alliances(members, rng))

    alliances = [
        (a, b) if rng.random() < 0.5 else (b, a)
        for a, b in dedupe_alliances(edges)
    ]
    rng.shuffle(alliances)

    names = list(weights)
    rng.shuffle(names)
    people = {name: weights[name] for name in names}

    return GeneratedChallenge(
        people=people,
        alliances=alliances,
        solution=solution,
        solution_group=tuple(groups[solution_index]),
    )
