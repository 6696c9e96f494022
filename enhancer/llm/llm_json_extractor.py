"""
LLM 响应 JSON 提取

模型经常在 JSON 前后附带说明文字或 markdown 代码块，本模块从原始输出中
恢复出唯一一个符合约定格式的结果：

    {"enhancedText": "<string>", "model": "<可选>", "notes": "<可选>"}

流程：
1. 去掉首尾空白
2. 若存在 ``` 代码块，取第一个代码块的内容（忽略语言标记）；内容为空或不含 { 时仍使用整段文本
3. 从左到右按花括号深度切分出候选片段（字符串字面量中的括号不计数）
4. 取第一个能被 json 解析的候选；都不行时退回到第一个 { 与最后一个 } 之间的片段
5. 按约定格式校验
"""
import json
from dataclasses import dataclass
from typing import List, Optional

from enhancer.llm.llm_exceptions import ExtractionError
from . import logger


FENCE = '```'
REQUIRED_FIELD = 'enhancedText'


@dataclass
class EnhancementPayload:
    """提取成功的结果，enhanced_text 保证非空"""

    enhanced_text: str
    model: Optional[str] = None
    notes: Optional[str] = None

    def to_json(self) -> str:
        data = {REQUIRED_FIELD: self.enhanced_text}
        if self.model is not None:
            data['model'] = self.model
        if self.notes is not None:
            data['notes'] = self.notes
        return json.dumps(data, ensure_ascii=False)


def recover(raw_text: str) -> EnhancementPayload:
    """
    从模型原始输出中恢复 EnhancementPayload

    Args:
        raw_text: 模型原始输出

    Returns:
        EnhancementPayload

    Raises:
        ExtractionError: noJSONFound / invalidJSON / missingField
    """
    text = (raw_text or '').strip()
    if not text:
        raise ExtractionError(ExtractionError.NO_JSON_FOUND, reason='empty response')

    block = _fenced_block(text)
    if block and '{' in block:
        text = block

    span = _choose_span(text)
    return _decode(span)


def _fenced_block(text: str) -> Optional[str]:
    """取第一个代码块的内容，没有代码块时返回 None"""
    if FENCE not in text:
        return None

    inside = False
    lines = []
    for line in text.splitlines():
        if line.strip().startswith(FENCE):
            if inside:
                break
            inside = True
            continue
        if inside:
            lines.append(line)

    return '\n'.join(lines).strip()


def _candidate_spans(text: str) -> List[str]:
    """
    按花括号深度切分候选片段

    每次深度回到 0 就得到一个候选。只在对象内部识别字符串字面量，
    对象外的说明文字里出现引号不影响切分。
    """
    spans = []
    depth = 0
    start = 0
    in_string = False
    escaped = False

    for index, char in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif char == '\\':
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"' and depth > 0:
            in_string = True
        elif char == '{':
            if depth == 0:
                start = index
            depth += 1
        elif char == '}' and depth > 0:
            depth -= 1
            if depth == 0:
                spans.append(text[start:index + 1])

    return spans


def _choose_span(text: str) -> str:
    first = text.find('{')
    if first < 0:
        raise ExtractionError(ExtractionError.NO_JSON_FOUND, reason='no opening brace')

    spans = _candidate_spans(text)
    for span in spans:
        try:
            json.loads(span)
        except ValueError:
            continue
        # 第一个合法 JSON 即为最终结果，即使之后的格式校验失败也不再尝试后面的候选
        return span

    last = text.rfind('}')
    logger.debug(f"没有可解析的候选片段（共 {len(spans)} 个），退回首尾花括号之间的内容")
    return text[first:last + 1] if last > first else text[first:]


def _decode(span: str) -> EnhancementPayload:
    try:
        data = json.loads(span)
    except ValueError as e:
        raise ExtractionError(ExtractionError.INVALID_JSON, reason=str(e)) from e

    if not isinstance(data, dict):
        raise ExtractionError(ExtractionError.INVALID_JSON, reason=f'expected object, got {type(data).__name__}')

    enhanced_text = data.get(REQUIRED_FIELD)
    if not isinstance(enhanced_text, str):
        raise ExtractionError(ExtractionError.INVALID_JSON, reason=f'{REQUIRED_FIELD} missing or not a string')

    for optional in ('model', 'notes'):
        value = data.get(optional)
        if value is not None and not isinstance(value, str):
            raise ExtractionError(ExtractionError.INVALID_JSON, reason=f'{optional} is not a string')

    if not enhanced_text.strip():
        raise ExtractionError(ExtractionError.MISSING_FIELD, field=REQUIRED_FIELD)

    return EnhancementPayload(
        enhanced_text=enhanced_text,
        model=data.get('model'),
        notes=data.get('notes'),
    )
