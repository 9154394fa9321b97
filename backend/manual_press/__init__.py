"""
手册发布系统 - 后端核心模块

模块结构：
- config/     运行期配置与版式配置
- models/     数据模型定义
- layout/     排版引擎（渲染/章节标记/两遍分页/页眉页脚叠加）
- storage/    版本计数器与PDF对象存储
- pipeline/   发布编排
- cli         命令行入口
"""

__version__ = "0.1.0"
