"""챕터 그래프 정적 검증 (오프라인 전용)

런타임 엔진은 잘못된 데이터를 조용히 "종료"로 강등하므로,
저작 오류는 여기서 모두 잡아야 한다.

검사 항목:
- 시작 노드 존재
- next / 선택지 참조 무결성
- BFS 도달성 (고아 노드)
- 종료 노드 1개 이상
- DFS 경로 열거 + 경로별 순환 탐지 + 깊이 상한
- 화자 / 표정 무결성
- battle 태그 → spirit 카탈로그
- next와 choices 동시 지정 (경고)
- 첫 선택지만 고르는 상태 머신 워크 (실제 엔진 사용)
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional

from .characters import KNOWN_CHARACTERS, CharacterPortrait
from .engine import DialogueEngine
from .models import Chapter, DialogueLine

logger = logging.getLogger(__name__)

MAX_PATH_DEPTH = 500
MAX_WALK_STEPS = 200


@dataclass
class PathWalkResult:
    paths: int = 0
    max_depth: int = 0
    errors: list[str] = field(default_factory=list)


@dataclass
class ChapterReport:
    """챕터 1개의 검증 결과"""

    chapter_id: str
    node_count: int = 0
    reachable_count: int = 0
    end_count: int = 0
    battle_end_count: int = 0
    path_count: int = 0
    max_depth: int = 0
    walk_steps: int = 0
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _edges(line: DialogueLine) -> list[str]:
    targets: list[str] = []
    if line.next:
        targets.append(line.next)
    targets.extend(choice.next for choice in line.choices)
    return targets


def check_start_node(chapter: Chapter) -> list[str]:
    if chapter.start_node not in chapter.lines:
        return [f'startNode "{chapter.start_node}" not found']
    return []


def check_references(chapter: Chapter) -> list[str]:
    """모든 next / 선택지 대상이 같은 챕터 안에 있어야 한다."""
    errors: list[str] = []
    for node_id, line in chapter.lines.items():
        if line.next and line.next not in chapter.lines:
            errors.append(f'{node_id}: next="{line.next}" not found')
        for i, choice in enumerate(line.choices):
            if choice.next not in chapter.lines:
                errors.append(f'{node_id}: choice[{i}] next="{choice.next}" not found')
    return errors


def find_reachable(chapter: Chapter) -> set[str]:
    """시작 노드에서 BFS. next + 모든 선택지 대상을 따라간다."""
    reachable: set[str] = set()
    queue: deque[str] = deque([chapter.start_node])
    while queue:
        node_id = queue.popleft()
        if node_id in reachable or node_id not in chapter.lines:
            continue
        reachable.add(node_id)
        queue.extend(_edges(chapter.lines[node_id]))
    return reachable


def find_unreachable(chapter: Chapter) -> list[str]:
    reachable = find_reachable(chapter)
    return [node_id for node_id in chapter.lines if node_id not in reachable]


def count_terminal_nodes(chapter: Chapter) -> tuple[int, int]:
    """(일반 종료 수, 전투 종료 수)"""
    end_count = 0
    battle_count = 0
    for line in chapter.lines.values():
        if not line.is_terminal:
            continue
        if line.battle:
            battle_count += 1
        else:
            end_count += 1
    return end_count, battle_count


def walk_paths(chapter: Chapter, max_depth: int = MAX_PATH_DEPTH) -> PathWalkResult:
    """선택지 분기별 모든 경로 DFS 열거.

    경로마다 방문 집합을 따로 둔다. 분기 간 합류는 순환이 아니고,
    같은 경로 안에서의 재방문만 순환으로 보고한다.
    재귀 대신 명시적 스택 사용 (깊이 상한이 재귀 한도와 겹치지 않도록).
    """
    result = PathWalkResult()
    stack: list[tuple[str, int, frozenset[str]]] = [(chapter.start_node, 0, frozenset())]

    while stack:
        node_id, depth, visited = stack.pop()

        if depth > max_depth:
            result.errors.append(
                f"Exceeded max depth at {node_id} (possible infinite loop)"
            )
            continue
        if node_id in visited:
            result.errors.append(
                f"Cycle detected: {node_id} already visited in this path"
            )
            continue

        line = chapter.lines.get(node_id)
        if line is None:
            result.errors.append(f'Node "{node_id}" not found')
            continue

        visited = visited | {node_id}
        result.max_depth = max(result.max_depth, depth)

        if line.is_terminal:
            result.paths += 1
            continue

        if line.has_choices:
            # 원래 순서대로 처리되도록 역순 push
            for choice in reversed(line.choices):
                stack.append((choice.next, depth + 1, visited))
            continue

        stack.append((line.next, depth + 1, visited))

    return result


def check_speakers(
    chapter: Chapter,
    characters: Mapping[str, CharacterPortrait] = KNOWN_CHARACTERS,
) -> list[str]:
    """화자는 알려진 캐릭터, 표정은 그 캐릭터의 표정 목록 안에 있어야 한다."""
    errors: list[str] = []
    for node_id, line in chapter.lines.items():
        if not line.speaker:
            if line.expression:
                errors.append(f'{node_id}: expression "{line.expression}" without speaker')
            continue
        portrait = characters.get(line.speaker)
        if portrait is None:
            errors.append(f'{node_id}: speaker "{line.speaker}" has no portrait mapping')
            continue
        if line.expression and not portrait.has_expression(line.expression):
            errors.append(
                f'{node_id}: "{line.speaker}" has no expression "{line.expression}" '
                f'(valid: {", ".join(portrait.expressions)})'
            )
    return errors


def check_battles(
    chapter: Chapter, spirit_ids: Optional[Iterable[str]]
) -> tuple[list[str], list[str]]:
    """battle 태그 → spirit 카탈로그. (errors, warnings)

    카탈로그가 없으면(None) 확인 불가로 경고만 남긴다.
    """
    errors: list[str] = []
    warnings: list[str] = []
    known = set(spirit_ids) if spirit_ids is not None else None

    for node_id, line in chapter.lines.items():
        if not line.battle:
            continue
        if known is None:
            warnings.append(
                f'{node_id}: battle="{line.battle}" not checked (spirit catalog unavailable)'
            )
        elif line.battle not in known:
            errors.append(f'{node_id}: battle="{line.battle}" not found in spirit catalog')
        if not line.is_terminal:
            warnings.append(
                f'{node_id}: battle="{line.battle}" on a non-terminal node is never triggered'
            )
    return errors, warnings


def check_competing_continuations(chapter: Chapter) -> list[str]:
    """next와 choices가 함께 있으면 next는 무시된다 → 경고"""
    return [
        f'{node_id}: next="{line.next}" ignored because choices are present'
        for node_id, line in chapter.lines.items()
        if line.next and line.has_choices
    ]


def walk_first_choices(
    chapter: Chapter, max_steps: int = MAX_WALK_STEPS
) -> tuple[int, list[str]]:
    """호스트가 하는 것처럼 실제 엔진을 돌린다. 선택지는 항상 첫 번째.

    반환: (진행 스텝 수, 문제 목록)
    """
    engine = DialogueEngine()
    engine.load_chapter(chapter)
    line = engine.start()
    issues: list[str] = []
    steps = 0

    if line is None:
        return 0, ["Engine could not start chapter"]

    while not engine.is_end() and steps < max_steps:
        steps += 1
        current = engine.get_current_line()
        if engine.has_choices():
            target = current.choices[0].next
            line = engine.choose(0)
        else:
            target = current.next
            line = engine.advance()
        if line is None:
            issues.append(f'Walk reached missing node "{target}"')
            break

    if steps >= max_steps and not engine.is_end():
        issues.append("Exceeded max steps, possible infinite loop")

    return steps, issues


def validate_chapter(
    chapter: Chapter,
    spirit_ids: Optional[Iterable[str]] = None,
    characters: Mapping[str, CharacterPortrait] = KNOWN_CHARACTERS,
) -> ChapterReport:
    """챕터 전체 검증. 모든 errors가 비어 있어야 통과."""
    report = ChapterReport(chapter_id=chapter.id, node_count=len(chapter.lines))

    report.errors.extend(check_start_node(chapter))
    report.errors.extend(check_references(chapter))

    reachable = find_reachable(chapter)
    report.reachable_count = len(reachable)
    unreachable = [n for n in chapter.lines if n not in reachable]
    if unreachable:
        report.errors.append(
            f"{len(unreachable)} unreachable nodes: {', '.join(unreachable)}"
        )

    report.end_count, report.battle_end_count = count_terminal_nodes(chapter)
    if report.end_count + report.battle_end_count == 0:
        report.errors.append("no end nodes found (infinite loop?)")

    walk = walk_paths(chapter)
    report.path_count = walk.paths
    report.max_depth = walk.max_depth
    # 시작 노드/참조 오류는 위에서 이미 보고됨. 경로 오류 중 순환·깊이만 추가.
    report.errors.extend(
        e for e in walk.errors if not e.startswith("Node ")
    )

    report.errors.extend(check_speakers(chapter, characters))

    battle_errors, battle_warnings = check_battles(chapter, spirit_ids)
    report.errors.extend(battle_errors)
    report.warnings.extend(battle_warnings)

    report.warnings.extend(check_competing_continuations(chapter))

    report.walk_steps, walk_issues = walk_first_choices(chapter)
    if not report.errors:
        report.errors.extend(walk_issues)

    if report.errors:
        logger.debug("Chapter %s: %d validation errors", chapter.id, len(report.errors))
    return report
