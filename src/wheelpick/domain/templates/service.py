"""テンプレート一覧の読み込み・変更・保存を一括で担うサービス。"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import replace
from typing import Iterable, Iterator, List, Optional, Sequence, Union

from ...infrastructure.settings import KeyValueStore, create_key_value_store
from .errors import (
    MSG_ENTER_OPTION_LABEL,
    MSG_SELECT_SUB_TEMPLATE,
    MSG_SUB_TEMPLATE_NOT_FOUND,
    MSG_UNKNOWN_OPTION_TYPE,
    ValidationError,
)
from .identifiers import OPTION_PREFIX, TEMPLATE_PREFIX, generate_id
from .models import (
    DEFAULT_TEMPLATE_NAME,
    NEW_TEMPLATE_NAME,
    Option,
    OptionType,
    Template,
)
from .repository import TemplateRepository

__all__ = ["TemplateStore"]

LOGGER = logging.getLogger(__name__)

DEFAULT_OPTION_LABELS = ("Option 1", "Option 2", "Option 3")


def _find(templates: Sequence[Template], template_id: str) -> Optional[Template]:
    for template in templates:
        if template.id == template_id:
            return template
    return None


class TemplateStore:
    """テンプレート集合の唯一の所有者。

    すべての変更操作は「全体を読み込む → メモリ上で変換する → 全体を書き戻す」
    を 1 単位として行う。単位はストアごとのロックで直列化されるため、
    同一インスタンスへ並行に呼び出しても更新が失われることはない。
    """

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        *,
        repository: Optional[TemplateRepository] = None,
    ) -> None:
        if repository is None:
            repository = TemplateRepository(store or create_key_value_store())
        self._repository = repository
        self._lock = threading.RLock()

    @contextmanager
    def _transaction(self) -> Iterator[List[Template]]:
        """ロック下で一覧を読み込み、ブロック終了時に書き戻す。"""

        with self._lock:
            templates = self._repository.load_templates()
            yield templates
            self._repository.save_templates(templates)

    # 読み込み ----------------------------------------------------------
    def list_templates(self) -> List[Template]:
        with self._lock:
            return self._repository.load_templates()

    def save_all_templates(self, templates: Iterable[Template]) -> None:
        with self._lock:
            self._repository.save_templates(list(templates))

    def get_template(self, template_id: str) -> Optional[Template]:
        return _find(self.list_templates(), template_id)

    def get_current_template_id(self) -> str:
        with self._lock:
            return self._repository.current_template_id()

    def get_current_template(self) -> Optional[Template]:
        """現在のテンプレートを返す。ID が古い場合は先頭を返す。"""

        with self._lock:
            templates = self.ensure_initial_template()
            current_id = self._repository.current_template_id()
        current = _find(templates, current_id) if current_id else None
        if current is not None:
            return current
        return templates[0] if templates else None

    # テンプレート操作 --------------------------------------------------
    def ensure_initial_template(self) -> List[Template]:
        """一覧が空なら既定テンプレートを作成し、現在の一覧を返す。"""

        with self._lock:
            templates = self._repository.load_templates()
            if templates:
                return templates
            default = Template(
                id=generate_id(TEMPLATE_PREFIX),
                name=DEFAULT_TEMPLATE_NAME,
                options=[
                    Option(id=generate_id(OPTION_PREFIX), label=label)
                    for label in DEFAULT_OPTION_LABELS
                ],
            )
            templates = [default]
            self._repository.save_templates(templates)
            self._repository.set_current_template_id(default.id)
            LOGGER.info("既定テンプレートを作成しました: %s", default.id)
            return templates

    def create_template(self, name: Optional[str] = None) -> Template:
        """空のテンプレートを末尾へ追加し、現在のテンプレートにする。"""

        template = Template(
            id=generate_id(TEMPLATE_PREFIX),
            name=(name or "").strip() or NEW_TEMPLATE_NAME,
        )
        with self._lock:
            with self._transaction() as templates:
                templates.append(template)
            self._repository.set_current_template_id(template.id)
        LOGGER.info("テンプレートを作成しました: %s (%s)", template.name, template.id)
        return template

    def select_template(self, template_id: str) -> Optional[Template]:
        """存在するテンプレートのみ現在のテンプレートとして選択する。"""

        with self._lock:
            template = _find(self._repository.load_templates(), template_id)
            if template is not None:
                self._repository.set_current_template_id(template.id)
        return template

    def delete_template(self, template_id: str) -> None:
        """テンプレートを削除し、参照していた選択肢も取り除く。"""

        with self._lock:
            with self._transaction() as templates:
                survivors = [
                    replace(
                        template,
                        options=[
                            option
                            for option in template.options
                            if not option.references(template_id)
                        ],
                    )
                    for template in templates
                    if template.id != template_id
                ]
                templates[:] = survivors
            if self._repository.current_template_id() == template_id:
                self._repository.set_current_template_id(
                    survivors[0].id if survivors else ""
                )
        LOGGER.info("テンプレートを削除しました: %s", template_id)

    def rename_template(self, template_id: str, name: str) -> None:
        """名前を変更し、参照している選択肢のラベルへ伝播する。"""

        with self._transaction() as templates:
            for index, template in enumerate(templates):
                # 自己参照の選択肢も含めて全テンプレートを走査する。
                templates[index] = replace(
                    template,
                    name=name if template.id == template_id else template.name,
                    options=[
                        replace(option, label=name)
                        if option.references(template_id)
                        else option
                        for option in template.options
                    ],
                )
        LOGGER.info("テンプレート名を変更しました: %s -> %s", template_id, name)

    # 選択肢操作 --------------------------------------------------------
    def add_option(
        self,
        template_id: str,
        label: Optional[str],
        option_type: Union[OptionType, str] = OptionType.TEXT,
        sub_template_id: Optional[str] = None,
    ) -> Optional[Option]:
        """選択肢を追加する。対象テンプレートが無い場合は ``None``。

        サブテンプレート種別では参照先の名前がラベルになる。
        """

        try:
            kind = OptionType(option_type)
        except ValueError:
            raise ValidationError(
                MSG_UNKNOWN_OPTION_TYPE, f"未知の選択肢種別です: {option_type!r}"
            ) from None

        with self._transaction() as templates:
            if kind is OptionType.SUBTEMPLATE:
                if not sub_template_id:
                    raise ValidationError(MSG_SELECT_SUB_TEMPLATE)
                referenced = _find(templates, sub_template_id)
                if referenced is None:
                    raise ValidationError(MSG_SUB_TEMPLATE_NOT_FOUND)
                option = Option(
                    id=generate_id(OPTION_PREFIX),
                    label=referenced.name,
                    type=kind,
                    sub_template_id=referenced.id,
                )
            else:
                text = (label or "").strip()
                if not text:
                    raise ValidationError(MSG_ENTER_OPTION_LABEL)
                option = Option(id=generate_id(OPTION_PREFIX), label=text)

            target = _find(templates, template_id)
            if target is None:
                LOGGER.debug("選択肢の追加先が見つかりません: %s", template_id)
                return None
            target.options = [*target.options, option]
        LOGGER.debug("選択肢を追加しました: %s -> %s", template_id, option.id)
        return option

    def update_option(
        self,
        template_id: str,
        option_id: str,
        *,
        label: Optional[str] = None,
        enabled: Optional[bool] = None,
    ) -> None:
        """選択肢へ部分的な変更を適用する。

        サブテンプレート選択肢のラベルを変更した場合、参照先テンプレートの
        名前と、同じテンプレートを参照する全選択肢のラベルも同じ値へ書き換える。
        """

        with self._transaction() as templates:
            owner = _find(templates, template_id)
            current = owner.option(option_id) if owner is not None else None
            if owner is None or current is None:
                return
            updated = current
            if label is not None:
                updated = replace(updated, label=label)
            if enabled is not None:
                updated = replace(updated, enabled=bool(enabled))
            owner.options = [
                updated if option.id == option_id else option
                for option in owner.options
            ]
            target_id = current.sub_template_id
            if not (label and current.is_sub_template and target_id):
                return
            referenced = _find(templates, target_id)
            if referenced is None:
                return
            referenced.name = label
            # 同じ参照先を持つ他の選択肢のラベルも揃える。
            for template in templates:
                template.options = [
                    replace(option, label=label)
                    if option.references(target_id)
                    else option
                    for option in template.options
                ]
            LOGGER.debug("選択肢ラベルから参照先の名前を更新しました: %s", referenced.id)

    def toggle_option_enabled(
        self, template_id: str, option_id: str, enabled: bool
    ) -> None:
        self.update_option(template_id, option_id, enabled=enabled)

    def delete_option(self, template_id: str, option_id: str) -> None:
        with self._transaction() as templates:
            target = _find(templates, template_id)
            if target is None:
                return
            target.options = [o for o in target.options if o.id != option_id]
            target.hidden_option_ids = [
                hidden for hidden in target.hidden_option_ids if hidden != option_id
            ]
        LOGGER.debug("選択肢を削除しました: %s -> %s", template_id, option_id)

    def reorder_options(self, template_id: str, option_ids: Sequence[str]) -> None:
        """ドラッグ操作後の並び順を保存する。

        指定されなかった選択肢は元の相対順のまま末尾に残る。
        """

        with self._transaction() as templates:
            target = _find(templates, template_id)
            if target is None:
                return
            by_id = {option.id: option for option in target.options}
            ordered: List[Option] = []
            for option_id in option_ids:
                option = by_id.pop(option_id, None)
                if option is not None:
                    ordered.append(option)
            ordered.extend(o for o in target.options if o.id in by_id)
            target.options = ordered

    # 選択状態 ----------------------------------------------------------
    def set_current_template_id(self, template_id: Optional[str]) -> None:
        with self._lock:
            self._repository.set_current_template_id(template_id)

    def get_hide_picked_enabled(self) -> bool:
        with self._lock:
            return self._repository.hide_picked_enabled()

    def set_hide_picked_enabled(self, enabled: bool) -> None:
        with self._lock:
            self._repository.set_hide_picked_enabled(enabled)

    def set_hidden_option(
        self, template_id: str, option_id: str, hidden: bool
    ) -> None:
        with self._transaction() as templates:
            target = _find(templates, template_id)
            if target is None:
                return
            already_hidden = option_id in target.hidden_option_ids
            if hidden and not already_hidden:
                target.hidden_option_ids = [*target.hidden_option_ids, option_id]
            elif not hidden and already_hidden:
                target.hidden_option_ids = [
                    h for h in target.hidden_option_ids if h != option_id
                ]

    def clear_hidden_options(self, template_id: str) -> None:
        """抽選済みとして隠している選択肢をすべて戻す。"""

        with self._transaction() as templates:
            target = _find(templates, template_id)
            if target is not None:
                target.hidden_option_ids = []
