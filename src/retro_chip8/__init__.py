# src/retro_chip8/__init__.py
"""
Retro Chip8

CHIP-8 バイトコードの命令デコード/実行エンジン、トレーサ、およびデスクトップフロントエンド。
"""
__version__ = "0.1.0"
