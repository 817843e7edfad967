"""
Profiling pipeline: LLM utilities, SQL oracle and stages
"""
