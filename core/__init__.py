"""Core modules for Manga Panel Studio"""
from .errors import MangaPanelError, ValidationError, EmptyCollectionError, GatewayError
from .handles import HandleRegistry
from .panels import ImageResource, GenerationResult, Panel, PanelStore
from .playback import PlaybackState, PlaybackController
from .openai_client import OpenAIClient
from .gateway import MangaPanelGateway
from .gateway_client import ProxyGatewayClient
