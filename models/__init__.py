"""
Models package exports.
"""
from models.api_models import Message, ChatSettings, SearchSettings, ModelConfig
from models.chat_models import ChatContext, LookupResult, QueryOutcome, FlowAction, FlowStep, LookupFn

__all__ = [
    'Message',
    'ChatSettings',
    'SearchSettings',
    'ModelConfig',
    'ChatContext',
    'LookupResult',
    'QueryOutcome',
    'FlowAction',
    'FlowStep',
    'LookupFn'
]
