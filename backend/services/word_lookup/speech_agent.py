# -*- coding: utf-8 -*-
"""
例句语音合成Agent - Alba NihonGo
调用 OpenAI 兼容的 /audio/speech 接口，为例句生成 Base64 音频
"""

import base64
import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


class SentenceSpeechAgent:
    """例句语音合成Agent"""

    def __init__(
        self,
        api_key: str,
        base_url: str,
        model: str = "tts-1",
        voice: str = "alloy",
        timeout: int = 15,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        初始化语音合成Agent

        Args:
            api_key: API密钥
            base_url: API基础URL
            model: 语音模型名称
            voice: 发音人
            timeout: 请求超时时间（秒）
            transport: 自定义httpx传输层（测试用）
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip('/')
        self.model = model
        self.voice = voice
        self.timeout = timeout
        self.transport = transport

    async def synthesize(self, text: str) -> Optional[str]:
        """
        合成一句日语

        Args:
            text: 日语文本

        Returns:
            Optional[str]: Base64编码的音频，失败返回None
        """
        if not text or not text.strip():
            return None

        headers = {
            'Authorization': f'Bearer {self.api_key}',
            'Content-Type': 'application/json'
        }
        payload = {
            'model': self.model,
            'input': text,
            'voice': self.voice,
            'response_format': 'mp3'
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    f"{self.base_url}/audio/speech",
                    headers=headers,
                    json=payload
                )

            if response.status_code != 200:
                logger.warning(f"⚠️ [TTS] 合成失败: HTTP {response.status_code}")
                return None

            audio_data = response.content
            logger.debug(f"✅ [TTS] 合成成功: {len(audio_data)} bytes")
            return base64.b64encode(audio_data).decode('ascii')

        except httpx.HTTPError as e:
            logger.warning(f"⚠️ [TTS] 合成异常: {e}")
            return None
