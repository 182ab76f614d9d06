"""App: ciclo de vida das sessões, pipeline de mensagens e infraestrutura.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- use_cases/: casos de uso (pipeline de mensagens recebidas)
- services/: fachada de comandos/status e simulação de digitação
- sessions/: sessão gerenciada, registry e snapshots
- infra/: implementações concretas de IO (Gemini, stores, notifier)
- protocols/: contratos/interfaces
- observability/: correlação e métricas em log

Padrão: app executa; ai decide; fsm governa; utils apoia.
"""
