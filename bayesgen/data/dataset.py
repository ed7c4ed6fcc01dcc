#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
数据集与属性定义
属性(Attribute)描述取值空间，数据集(Dataset)以整数编码保存实例
"""
from enum import Enum
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from bayesgen.utils.logging import setup_logger

logger = setup_logger("dataset")


class AttributeType(str, Enum):
    """属性类型"""
    NOMINAL = 'nominal'
    CONTINUOUS = 'continuous'


@dataclass(frozen=True)
class Attribute:
    """
    随机变量（属性）

    Attributes:
        id: 属性ID，同时是网络中节点的索引
        name: 属性名
        type: 属性类型（离散/连续）
        values: 离散属性的有序取值名，取值的编码即其下标
    """
    id: int
    name: str
    type: AttributeType = AttributeType.NOMINAL
    values: Tuple[str, ...] = ()

    @property
    def is_nominal(self) -> bool:
        return self.type == AttributeType.NOMINAL

    @property
    def cardinality(self) -> int:
        """取值个数"""
        return len(self.values)

    @property
    def codes(self) -> range:
        """按取值顺序排列的编码"""
        return range(len(self.values))

    def value_name(self, code: int) -> str:
        """编码 -> 取值名"""
        return self.values[int(code)]

    def value_code(self, name) -> int:
        """取值名 -> 编码"""
        try:
            return self.values.index(name)
        except ValueError:
            raise KeyError(f"属性 {self.name} 没有取值 {name!r}") from None


class Dataset:
    """
    离散数据集

    实例表是一个DataFrame，每个属性ID对应一列，取值为整数编码，缺失值为NaN
    """

    def __init__(
        self,
        attributes: Sequence[Attribute],
        frame: Optional[pd.DataFrame] = None,
        class_attribute: Optional[int] = None
    ):
        """
        初始化数据集

        Args:
            attributes: 有序属性列表
            frame: 实例表，列名为属性ID
            class_attribute: 类别属性ID
        """
        self._attributes = list(attributes)
        self._by_id = {a.id: a for a in self._attributes}
        self._by_name = {a.name: a for a in self._attributes}
        if len(self._by_id) != len(self._attributes):
            raise ValueError("属性ID重复")
        if len(self._by_name) != len(self._attributes):
            raise ValueError("属性名重复")

        ids = [a.id for a in self._attributes]
        if frame is None:
            frame = pd.DataFrame(columns=ids, dtype='int64')
        missing_columns = set(ids) - set(frame.columns)
        if missing_columns:
            raise ValueError(f"实例表缺少属性列: {sorted(missing_columns)}")
        self._frame = frame[ids].reset_index(drop=True)
        self._validate_codes()

        self._class_id = None
        if class_attribute is not None:
            self.set_class_attribute(self._by_id[class_attribute].name)

    def _validate_codes(self) -> None:
        """检查离散属性的编码是否落在取值范围内"""
        for attribute in self._attributes:
            if not attribute.is_nominal:
                continue
            column = self._frame[attribute.id].dropna()
            if len(column) == 0:
                continue
            if column.min() < 0 or column.max() >= attribute.cardinality:
                raise ValueError(
                    f"属性 {attribute.name} 的编码超出取值范围 [0, {attribute.cardinality})"
                )

    # ============ 属性 ============

    @property
    def attributes(self) -> List[Attribute]:
        return list(self._attributes)

    @property
    def attribute_ids(self) -> List[int]:
        return [a.id for a in self._attributes]

    @property
    def num_attributes(self) -> int:
        return len(self._attributes)

    def get_attribute_by_id(self, attribute_id: int) -> Attribute:
        return self._by_id[attribute_id]

    def get_attribute_by_name(self, name: str) -> Attribute:
        return self._by_name[name]

    # ============ 类别属性 ============

    def set_class_attribute(self, name: str) -> None:
        """按属性名指定类别属性"""
        if name not in self._by_name:
            raise KeyError(f"数据集中没有属性 {name}")
        attribute = self._by_name[name]
        if not attribute.is_nominal:
            raise ValueError(f"类别属性 {name} 必须是离散属性")
        self._class_id = attribute.id

    @property
    def class_attribute(self) -> Optional[Attribute]:
        if self._class_id is None:
            return None
        return self._by_id[self._class_id]

    @property
    def class_attribute_id(self) -> Optional[int]:
        return self._class_id

    def class_counts(self) -> Dict[int, int]:
        """
        统计每个类别编码的实例数

        Returns:
            类别编码 -> 实例数，没有出现的类别计为0
        """
        if self._class_id is None:
            raise ValueError("尚未指定类别属性")
        attribute = self._by_id[self._class_id]
        counts = self._frame[self._class_id].dropna().astype('int64').value_counts()
        return {code: int(counts.get(code, 0)) for code in attribute.codes}

    # ============ 实例 ============

    @property
    def frame(self) -> pd.DataFrame:
        """整数编码的实例表（只读使用）"""
        return self._frame

    @property
    def num_instances(self) -> int:
        return len(self._frame)

    def __len__(self) -> int:
        return len(self._frame)

    def column(self, attribute_id: int) -> pd.Series:
        return self._frame[attribute_id]

    def complete_columns(self, attribute_ids: Sequence[int]) -> pd.DataFrame:
        """
        取出若干列中没有缺失值的行

        Args:
            attribute_ids: 属性ID列表

        Returns:
            int64编码的DataFrame
        """
        columns = list(attribute_ids)
        sub = self._frame[columns].dropna()
        return sub.astype('int64')

    def instance(self, index: int) -> Dict[int, int]:
        """
        单个实例：属性ID -> 编码，缺失的属性不出现在字典中
        """
        row = self._frame.iloc[index]
        return {
            attribute_id: int(value)
            for attribute_id, value in row.items()
            if not pd.isna(value)
        }

    def instances(self) -> Iterator[Dict[int, int]]:
        for index in range(len(self._frame)):
            yield self.instance(index)

    # ============ 构造与转换 ============

    def with_frame(self, frame: pd.DataFrame) -> 'Dataset':
        """使用相同属性结构构造新数据集"""
        return Dataset(self._attributes, frame, self._class_id)

    @classmethod
    def from_instances(
        cls,
        attributes: Sequence[Attribute],
        instances: Sequence[Dict[int, int]],
        class_attribute: Optional[int] = None
    ) -> 'Dataset':
        """从 属性ID -> 编码 的字典列表构造数据集"""
        ids = [a.id for a in attributes]
        frame = pd.DataFrame(
            [[inst.get(i, np.nan) for i in ids] for inst in instances],
            columns=ids
        )
        return cls(attributes, frame, class_attribute)

    @classmethod
    def from_frame(cls, df: pd.DataFrame, class_column: Optional[str] = None) -> 'Dataset':
        """
        从原始取值的DataFrame构造数据集

        每一列都视为离散属性，取值按排序后的顺序编码，NaN保留为缺失值

        Args:
            df: 原始数据
            class_column: 类别属性列名

        Returns:
            Dataset
        """
        attributes = []
        columns = {}
        for attribute_id, name in enumerate(df.columns):
            series = df[name]
            values = sorted(series.dropna().unique().tolist(), key=lambda v: (str(type(v)), v))
            attributes.append(Attribute(
                id=attribute_id,
                name=str(name),
                type=AttributeType.NOMINAL,
                values=tuple(str(v) for v in values)
            ))
            mapping = {v: code for code, v in enumerate(values)}
            columns[attribute_id] = series.map(mapping).astype('float64')

        frame = pd.DataFrame(columns, index=df.index)
        logger.info(f"数据编码完成: {len(frame)} 条实例, {len(attributes)} 个属性")

        dataset = cls(attributes, frame)
        if class_column is not None:
            dataset.set_class_attribute(str(class_column))
        return dataset

    def to_frame(self) -> pd.DataFrame:
        """
        还原为以属性名为列、取值名为内容的DataFrame

        离散属性的缺失值还原为 None
        """
        decoded = {}
        for attribute in self._attributes:
            column = self._frame[attribute.id]
            if attribute.is_nominal:
                names = column.map(
                    lambda v, a=attribute: None if pd.isna(v) else a.value_name(int(v))
                )
                decoded[attribute.name] = names.astype(object).where(column.notna(), None)
            else:
                decoded[attribute.name] = column
        return pd.DataFrame(decoded)

    def require_nominal(self) -> None:
        """结构学习只支持离散属性"""
        continuous = [a.name for a in self._attributes if not a.is_nominal]
        if continuous:
            raise ValueError(f"结构学习只支持离散属性，以下属性是连续的: {continuous}")

    def __repr__(self) -> str:
        return (f"Dataset(attributes={self.num_attributes}, "
                f"instances={self.num_instances}, class={self._class_id})")
