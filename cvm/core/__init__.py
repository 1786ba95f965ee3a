"""版本解析与本地仓库管理核心"""
