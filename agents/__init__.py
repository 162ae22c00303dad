"""RiskRadar Agents"""
