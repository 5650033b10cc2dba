"""
Alba NihonGo Backend 主程序入口
FastAPI 应用程序启动和配置
"""

import logging
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from config.settings import settings
from deps.dependencies import get_controller
from routers import search_router, deck_router, game_router

# 配置应用日志
logging.basicConfig(
    level=logging.INFO,
    format='%(levelname)s:%(name)s:%(message)s'
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用程序生命周期管理"""
    # 启动时执行
    print("\n🚀 Alba NihonGo Backend 正在启动...")
    print(f"📱 应用名称: {settings.app_name}")
    print(f"🔢 版本: {settings.version}")

    # 从存储加载卡组
    controller = app.dependency_overrides.get(get_controller, get_controller)()
    print(f"🎴 卡组: {controller.state.collection_size} 张卡片")
    print(f"📖 词典服务: {'已配置' if controller.state.dictionary_ready else '未配置'}")

    yield

    # 关闭时执行
    if controller.game is not None:
        controller.game.cancel()
    print("\n👋 Alba NihonGo Backend 正在关闭...")


# 创建 FastAPI 应用
app = FastAPI(
    title=settings.app_name,
    description=settings.description,
    version=settings.version,
    debug=settings.debug,
    lifespan=lifespan
)

# 配置 CORS 中间件
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # 开发阶段允许所有来源
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# 注册路由
app.include_router(search_router.router)
app.include_router(deck_router.router)
app.include_router(game_router.router)


# 根路径
@app.get("/")
async def root():
    """根路径 - 健康检查"""
    return {
        "app": settings.app_name,
        "version": settings.version,
        "status": "running",
        "message": "Alba NihonGo Backend API 正在运行"
    }


# 健康检查端点
@app.get("/health")
async def health_check():
    """健康检查端点"""
    return {
        "status": "healthy",
        "service": "Alba NihonGo Backend",
        "version": settings.version
    }


if __name__ == "__main__":
    print(f"\n🌟 启动 {settings.app_name}")
    print(f"🔧 调试模式: {'开启' if settings.debug else '关闭'}")
    print(f"🌐 服务地址: http://{settings.host}:{settings.port}")
    print(f"📚 API文档: http://{settings.host}:{settings.port}/docs")

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level
    )
