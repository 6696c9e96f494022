import os

# 版本信息
__version__ = '1.0'

# 项目根目录
BASE_DIR = os.path.dirname(os.path.abspath(__file__))


# 增强器配置
class EnhancerConfig:
    config_dir = os.path.join(BASE_DIR, 'config')   # 用户配置目录（config.json、模型缓存）
    config_file = 'config.json'                     # 用户配置文件名
    watch_config = True                             # 是否监控配置文件的外部修改并自动重载
    watch_debounce = 1.0                            # 配置文件监控防抖延迟（秒）

    processing_timeout = 45.0       # 单次处理的总时限（秒），超时后放弃本次结果
    permission_recheck_delay = 1.0  # 请求辅助功能权限后，等待多久再次检查（秒）

    provider_timeout = 30.0         # 单次 API 请求超时（秒）
    max_tokens = 1000               # 单次请求的输出 token 上限
    openai_temperature = 0.7        # OpenAI 请求的 temperature

    copy_wait = 0.1                 # 模拟 Ctrl+C 后等待剪贴板更新的时间（秒）
    paste_delay = 0.05              # 写入剪贴板到模拟 Ctrl+V 之间的间隔（秒）

    model_cache_ttl = 24 * 3600     # 模型列表缓存有效期（秒）
    model_recent_days = 365         # 只列出最近多少天内发布的模型

    compression_preset = 'balanced' # 截图压缩预设：'ultra_high', 'high', 'balanced', 'efficient'

    show_status = True              # 处理期间是否在终端显示状态动画

    # 日志配置
    log_level = 'INFO'              # 日志级别：'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'
