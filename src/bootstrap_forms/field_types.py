"""
フィールドタイプの定義
フィールドの種類、選択肢、フィールド記述子を定義
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Sequence

from pydantic import BaseModel, ConfigDict


class UnsupportedFieldType(ValueError):
    """未対応のフィールドタイプが指定された"""

    def __init__(self, type: str):
        self.type = type
        supported = ", ".join(t.value for t in FieldType)
        super().__init__(f"未対応のフィールドタイプです: {type!r}（対応: {supported}）")


class FieldType(str, Enum):
    """フィールドタイプの列挙型"""

    TEXT = "text"
    INPUT = "input"
    EMAIL = "email"
    HIDDEN = "hidden"
    TEL = "tel"
    DATE = "date"
    DATETIME_LOCAL = "datetime-local"
    PASSWORD = "password"
    TEXTAREA = "textarea"
    NUMBER = "number"
    SELECT = "select"
    MULTISELECT = "multiselect"
    CHECKBOX = "checkbox"
    CHECKBOXES = "checkboxes"
    RADIO = "radio"

    @classmethod
    def parse(cls, value: "str | FieldType") -> "FieldType":
        """文字列からフィールドタイプを取得（未対応なら UnsupportedFieldType）"""
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedFieldType(str(value)) from None

    @property
    def is_plain_input(self) -> bool:
        return self in PLAIN_INPUT_TYPES

    @property
    def input_type(self) -> str:
        """<input> の type 属性値"""
        if self is FieldType.INPUT:
            return "text"
        return self.value


PLAIN_INPUT_TYPES = frozenset(
    {
        FieldType.TEXT,
        FieldType.INPUT,
        FieldType.EMAIL,
        FieldType.HIDDEN,
        FieldType.TEL,
        FieldType.DATE,
        FieldType.DATETIME_LOCAL,
        FieldType.PASSWORD,
    }
)

# options のうち選択肢ではなくフラグとして扱うキー
FLAG_KEYS = ("readonly", "checked")


@dataclass
class SelectOption:
    """選択肢のオプションを定義するクラス"""

    value: str
    label: str = ""

    def __post_init__(self):
        self.value = str(self.value)
        self.label = str(self.label) if self.label else self.value


def normalize_options(
    options: Mapping[Any, Any] | Sequence[SelectOption | str] | None,
) -> list[SelectOption]:
    """選択肢を SelectOption のリストに揃える（フラグ用のキーは除外）"""
    if not options:
        return []
    if isinstance(options, Mapping):
        return [
            SelectOption(str(key), str(label))
            for key, label in options.items()
            if key not in FLAG_KEYS
        ]
    result: list[SelectOption] = []
    for opt in options:
        if isinstance(opt, SelectOption):
            result.append(opt)
        else:
            result.append(SelectOption(str(opt), str(opt)))
    return result


class FieldDescriptor(BaseModel):
    """描画対象のフィールド情報"""

    model_config = ConfigDict(frozen=True)

    label: str
    name: str
    type: FieldType = FieldType.TEXT
    value: Any = None
    options: list[SelectOption] = []
    readonly: bool = False
    checked: bool = False

    @classmethod
    def build(
        cls,
        label: str,
        name: str,
        type: "str | FieldType" = "text",
        value: Any = None,
        options: Mapping[Any, Any] | Sequence[SelectOption | str] | None = None,
    ) -> "FieldDescriptor":
        """field() の引数から記述子を生成"""
        field_type = FieldType.parse(type)
        flags: Mapping[Any, Any] = options if isinstance(options, Mapping) else {}
        return cls(
            label=label,
            name=name,
            type=field_type,
            value=value,
            options=normalize_options(options),
            readonly=bool(flags.get("readonly", False)),
            checked=bool(flags.get("checked", False)),
        )
