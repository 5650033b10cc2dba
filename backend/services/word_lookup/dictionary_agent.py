# -*- coding: utf-8 -*-
"""
AI词典查询Agent - Alba NihonGo
调用 OpenAI 兼容的 chat/completions 接口生成日语单词卡片
"""

import asyncio
import json
import logging
from typing import List, Optional

import httpx
from pydantic import ValidationError

from core.errors import ConnectivityError
from models.vocab_models import ExampleSentence, VerbTenses, VocabularyData
from services.word_lookup.speech_agent import SentenceSpeechAgent

logger = logging.getLogger(__name__)


PROMPT_TEMPLATE = """You are a Japanese dictionary. The user searched for "{query}".
The query may be English, romaji or Japanese script.
Return ONLY a JSON object, no extra text:

{{
  "found": true,
  "kanji": "word in kanji (or kana if it has no kanji)",
  "kana": "reading in hiragana or katakana",
  "romaji": "Hepburn romaji",
  "english": ["main meaning", "other meanings"],
  "sentences": [
    {{"japanese": "example sentence", "english": "translation", "romaji": "romaji"}}
  ],
  "tenses": {{
    "present": {{"japanese": "...", "english": "...", "romaji": "..."}},
    "past": {{"japanese": "...", "english": "...", "romaji": "..."}},
    "future": {{"japanese": "...", "english": "...", "romaji": "..."}}
  }}
}}

Rules:
1. Give 2-3 simple example sentences
2. Include "tenses" only when the word is a verb, otherwise omit it
3. If the query is not a real word, return {{"found": false}}"""


class DictionaryAgent:
    """AI词典查询Agent"""

    def __init__(
        self,
        api_key: str,
        base_url: str,
        model: str = "gemini-2.5-flash",
        timeout: int = 30,
        max_tokens: int = 1200,
        speech_agent: Optional[SentenceSpeechAgent] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        初始化词典Agent

        Args:
            api_key: API密钥
            base_url: API基础URL
            model: 使用的模型名称
            timeout: 请求超时时间（秒）
            max_tokens: 最大返回token数
            speech_agent: 例句语音合成Agent，为None时不生成音频
            transport: 自定义httpx传输层（测试用）
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip('/')
        self.model = model
        self.timeout = timeout
        self.max_tokens = max_tokens
        self.speech_agent = speech_agent
        self.transport = transport

    async def lookup(self, query: str) -> Optional[VocabularyData]:
        """
        查询单词

        Args:
            query: 查询文本（英文、罗马字或日文）

        Returns:
            Optional[VocabularyData]: 单词卡片，查不到时返回None

        Raises:
            ConnectivityError: 无法连接词典服务
        """
        logger.info(f"📖 查询单词: {query}")

        prompt = PROMPT_TEMPLATE.format(query=query)
        response_text = await self._call_chat_api(prompt)

        entry = self._parse_response(query, response_text)
        if entry is None:
            return None

        if self.speech_agent is not None:
            entry = await self._attach_audio(entry)

        logger.info(f"✅ 查询完成: {entry.kanji}, {len(entry.sentences)}条例句")
        return entry

    async def _call_chat_api(self, prompt: str) -> str:
        """
        调用 chat/completions 接口

        Returns:
            str: 模型返回的文本（可能为空）

        Raises:
            ConnectivityError: 网络异常或非200响应
        """
        headers = {
            'Authorization': f'Bearer {self.api_key}',
            'Content-Type': 'application/json'
        }

        payload = {
            'model': self.model,
            'messages': [
                {
                    'role': 'user',
                    'content': prompt
                }
            ],
            'max_tokens': self.max_tokens,
            'temperature': 0.3,
            'response_format': {'type': 'json_object'}
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    f"{self.base_url}/chat/completions",
                    headers=headers,
                    json=payload
                )
        except httpx.HTTPError as e:
            logger.error(f"❌ 词典服务调用异常: {e}")
            raise ConnectivityError(str(e)) from e

        if response.status_code != 200:
            logger.error(f"❌ 词典服务错误: HTTP {response.status_code}")
            logger.debug(f"   响应: {response.text}")
            raise ConnectivityError(f"HTTP {response.status_code}")

        try:
            data = response.json()
            return data['choices'][0]['message']['content'] or ""
        except (ValueError, KeyError, IndexError, TypeError):
            logger.warning(f"⚠️ 词典服务返回格式异常: {response.text[:200]}")
            return ""

    def _parse_response(self, query: str, response_text: str) -> Optional[VocabularyData]:
        """
        解析模型返回的JSON

        Args:
            query: 查询文本
            response_text: 模型返回的文本

        Returns:
            Optional[VocabularyData]: 解析结果，查不到或格式错误返回None
        """
        # 清理可能的markdown代码块标记
        cleaned_text = response_text.strip()
        if cleaned_text.startswith('```json'):
            cleaned_text = cleaned_text[7:]
        if cleaned_text.startswith('```'):
            cleaned_text = cleaned_text[3:]
        if cleaned_text.endswith('```'):
            cleaned_text = cleaned_text[:-3]
        cleaned_text = cleaned_text.strip()

        if not cleaned_text:
            logger.warning(f"⚠️ 词典服务返回为空: {query}")
            return None

        try:
            data = json.loads(cleaned_text)
        except json.JSONDecodeError as e:
            logger.warning(f"⚠️ JSON解析失败: {e}")
            logger.debug(f"   原始文本: {response_text[:200]}...")
            return None

        if not isinstance(data, dict) or data.get('found') is False:
            logger.info(f"ℹ️ 未找到单词: {query}")
            return None

        try:
            return VocabularyData.model_validate(data)
        except ValidationError as e:
            logger.warning(f"⚠️ 词典数据格式不完整: {e}")
            return None

    async def _attach_audio(self, entry: VocabularyData) -> VocabularyData:
        """为所有例句和时态例句生成音频"""
        targets: List[ExampleSentence] = list(entry.sentences)
        if entry.tenses is not None:
            targets += [entry.tenses.present, entry.tenses.past, entry.tenses.future]

        audios = await asyncio.gather(
            *(self.speech_agent.synthesize(s.japanese) for s in targets)
        )
        voiced = [s.model_copy(update={'audio': a}) for s, a in zip(targets, audios)]

        sentence_count = len(entry.sentences)
        tenses = None
        if entry.tenses is not None:
            present, past, future = voiced[sentence_count:]
            tenses = VerbTenses(present=present, past=past, future=future)

        return entry.model_copy(update={
            'sentences': voiced[:sentence_count],
            'tenses': tenses,
        })
