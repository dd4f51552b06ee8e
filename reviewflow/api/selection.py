"""
Выбор ревьюверов из состава команды.

Чистые функции без обращений к БД. Состав команды обходится в том порядке,
в котором его отдал репозиторий, поэтому результат детерминирован.
"""
from typing import Iterable, List, Optional


def _is_eligible(member, author_id: str, excluded) -> bool:
    return member.id != author_id and member.is_active and member.id not in excluded


def select_reviewers(author_id: str, roster: Iterable, max_count: int) -> List[str]:
    """
    Возвращает до max_count активных участников команды, кроме автора.
    Если подходящих меньше, возвращает сколько есть (в том числе пустой список).
    """
    reviewers = []
    if max_count <= 0:
        return reviewers

    for member in roster:
        if not _is_eligible(member, author_id, reviewers):
            continue
        reviewers.append(member.id)
        if len(reviewers) == max_count:
            break
    return reviewers


def select_replacement(author_id: str, current_reviewer_ids: Iterable[str], roster: Iterable) -> Optional[str]:
    """
    Первый активный участник команды, который не автор и ещё не ревьювер.
    None, если такого нет.
    """
    current = set(current_reviewer_ids)
    for member in roster:
        if _is_eligible(member, author_id, current):
            return member.id
    return None
