"""テキスト処理ユーティリティ"""

import re
from typing import Iterable, Optional


def normalize_text(text: Optional[str]) -> Optional[str]:
    """
    テキストを正規化

    - 前後の空白を除去
    - 連続する空白を1つに
    - 全角スペースを半角スペースに変換
    """
    if not text:
        return None

    text = text.replace("　", " ")
    text = re.sub(r"\s+", " ", text)
    text = text.strip()

    return text if text else None


def first_non_empty(*values: Optional[str]) -> str:
    """最初の空でない文字列を返す（なければ空文字）"""
    for value in values:
        if value:
            return value
    return ""


def join_non_empty(parts: Iterable[Optional[str]], separator: str = ", ") -> str:
    """空の要素を除いて連結"""
    return separator.join(part for part in parts if part)


def truncate_text(text: str, max_length: int = 100, suffix: str = "...") -> str:
    """
    テキストを指定長で切り詰め

    Args:
        text: 対象テキスト
        max_length: 最大文字数
        suffix: 切り詰め時の接尾辞

    Returns:
        切り詰められたテキスト
    """
    if not text or len(text) <= max_length:
        return text

    return text[: max_length - len(suffix)] + suffix
