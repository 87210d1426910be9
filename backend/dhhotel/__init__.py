"""
dhhotel - 酒店后台预订与支付生命周期引擎

包含：
- models: 持久化实体与输入模式
- stores: 房间/客户/预订/支付存储
- services: 定价、可用性、预订生命周期、支付对账
- domain: 预订状态机与结算规则
"""

__version__ = "1.0.0"
