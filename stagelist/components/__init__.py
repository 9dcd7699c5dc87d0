"""Components layer - pure domain logic for the performance queue.

Components are leaf modules that:
- Do NOT import services or interfaces
- ARE imported and used BY services
- May import from: helpers, other components

Architecture:
- helpers/ = stdlib-only utilities and DTOs
- components/ = domain logic building blocks (this layer)
- persistence/ = gateway contract and store adapters
- services/ = orchestration, DI, long-lived resources
- interfaces/ = HTTP presentation
"""
