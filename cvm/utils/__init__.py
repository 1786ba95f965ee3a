"""通用工具：日志、原子写入、YAML 读写、网络拉取"""
