"""
药名、书名别名表
将习用名、简称统一为正名
"""

from typing import Optional

# 药物别名 -> 正名
# 值必须是正名，不能再出现在键中
HERB_ALIASES = {
    '熟地': '熟地黄',
    '大熟地': '熟地黄',
    '生地': '生地黄',
    '干地黄': '生地黄',
    '薏米': '薏苡仁',
    '苡仁': '薏苡仁',
    '米仁': '薏苡仁',
    '元胡': '延胡索',
    '玄胡': '延胡索',
    '延胡': '延胡索',
    '山肉': '山茱萸',
    '山萸肉': '山茱萸',
    '萸肉': '山茱萸',
    '锦纹': '大黄',
    '川军': '大黄',
    '枣仁': '酸枣仁',
    '银花': '金银花',
    '双花': '金银花',
    '二花': '金银花',
    '云苓': '茯苓',
    '白茯苓': '茯苓',
    '杭芍': '白芍',
    '白芍药': '白芍',
    '赤芍药': '赤芍',
    '丹皮': '牡丹皮',
    '粉丹皮': '牡丹皮',
    '苦杏仁': '杏仁',
    '光杏仁': '杏仁',
    '淮山': '山药',
    '怀山药': '山药',
    '淮山药': '山药',
    '寸冬': '麦冬',
    '麦门冬': '麦冬',
    '天门冬': '天冬',
    '广皮': '陈皮',
    '橘皮': '陈皮',
    '川贝': '川贝母',
    '浙贝': '浙贝母',
    '公英': '蒲公英',
    '红枣': '大枣',
    '姜半夏': '半夏',
    '法半夏': '半夏',
    '清半夏': '半夏',
    '国老': '甘草',
    '粉甘草': '甘草',
    '北芪': '黄芪',
    '黄耆': '黄芪',
    '台参': '党参',
    '潞党参': '党参',
    '焦栀子': '栀子',
    '山栀': '栀子',
    '牛子': '牛蒡子',
    '大力子': '牛蒡子',
    '寄生': '桑寄生',
    '怀牛膝': '牛膝',
    '泽泄': '泽泻',
}

# 书名别名 -> 通用简称
BOOK_ALIASES = {
    '医学衷中参西录': '衷中参西',
    '备急千金要方': '千金方',
    '千金要方': '千金方',
    '千金翼方': '千金翼',
    '太平惠民和剂局方': '和剂局方',
    '局方': '和剂局方',
    '伤寒杂病论': '伤寒论',
    '金匮要略方论': '金匮要略',
    '金匮': '金匮要略',
    '严氏济生方': '济生方',
    '外台秘要方': '外台秘要',
    '肘后备急方': '肘后方',
    '仙授理伤续断秘方': '理伤续断方',
}

UNKNOWN_SOURCE = '未知'

# 书名号等括号
_BOOK_BRACKETS = '《》〈〉<>「」『』'


def resolve_herb_alias(raw_name: str) -> str:
    """药名归一，未收录的别名原样返回"""
    return HERB_ALIASES.get(raw_name, raw_name)


def resolve_book_alias(raw_source: Optional[str]) -> str:
    """
    书名归一

    去除空白和书名号；空值或非文本返回"未知"；未收录的书名返回去括号后的原名
    """
    if not raw_source or not isinstance(raw_source, str):
        return UNKNOWN_SOURCE
    cleaned = raw_source.strip()
    for bracket in _BOOK_BRACKETS:
        cleaned = cleaned.replace(bracket, '')
    cleaned = cleaned.strip()
    if not cleaned:
        return UNKNOWN_SOURCE
    return BOOK_ALIASES.get(cleaned, cleaned)
