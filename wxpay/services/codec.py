"""
XML 报文编解码

微信支付 v2 接口使用扁平 XML：<xml><key><![CDATA[value]]></key>...</xml>
"""
import xml.etree.ElementTree as ET
from typing import Any, Dict, Mapping

from ..exceptions import ValidationError


def map_to_xml(params: Mapping[str, Any]) -> str:
    """参数字典转 XML，数字原样输出，字符串放在 CDATA 中"""
    parts = ['<xml>']
    for k, v in params.items():
        if v is None:
            continue
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            parts.append(f'<{k}>{v}</{k}>')
        else:
            text = str(v).replace(']]>', ']]]]><![CDATA[>')
            parts.append(f'<{k}><![CDATA[{text}]]></{k}>')
    parts.append('</xml>')
    return ''.join(parts)


def xml_to_map(text: str) -> Dict[str, str]:
    """XML 转参数字典，所有值均为文本"""
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise ValidationError(f'XML 报文解析失败: {e}') from e
    return {child.tag: (child.text or '') for child in root}


def is_xml(text: str) -> bool:
    return text.lstrip().startswith('<')
