"""跨域中继（FastAPI）。"""
