"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) que implementan adaptadores concretos.
- Permite invertir dependencias: el facade de ciclo de vida depende de
  abstracciones, no del proceso Java.
"""
