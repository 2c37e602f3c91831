"""
Acesso a dados.

Regras comuns a todos os módulos:
  - toda consulta ignora linhas com deleted_at preenchido;
  - toda consulta/alteração de entidade do tenant recebe tenant_id explícito
    e o aplica no WHERE (update/delete com tenant errado afeta 0 linhas);
  - repositórios fazem add/flush, quem faz commit/rollback é o service.
"""
