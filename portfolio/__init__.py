"""
Portfolio Desk — 持仓追踪、配置比例、预期报酬

Modules:
- holdings: 持仓与投资组合数据 (schema, JSON store)
- valuation: 配置比例 / 年贡献 / 类别汇总 / 风险属性
"""
