from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, TEXT
from sqlalchemy.orm import relationship, validates
from .database import Base # Importa o 'Base' de database.py

# 1. Modelo de Tabela para Endereços
class Endereco(Base):
    __tablename__ = "TB_ENDERECO"
    id_endereco = Column("ID_ENDERECO", Integer, primary_key=True, autoincrement=True)
    cep = Column("CEP", String(8))
    logradouro = Column("LOGRADOURO", String(255))
    numero = Column("NUMERO", Integer, default=0)
    bairro = Column("BAIRRO", String(100))
    cidade = Column("CIDADE", String(100))
    estado = Column("ESTADO", String(50))
    pais = Column("PAIS", String(50))
    complemento = Column("COMPLEMENTO", String(255))
    observacao = Column("OBSERVACAO", TEXT)

# 2. Modelo de Tabela para Contatos
class Contato(Base):
    __tablename__ = "TB_CONTATO"
    id_contato = Column("ID_CONTATO", Integer, primary_key=True, autoincrement=True)
    email = Column("EMAIL", String(255))
    ddd = Column("DDD", Integer, default=0)
    ddi = Column("DDI", Integer, default=0)
    telefone1 = Column("TELEFONE1", String(20))
    telefone2 = Column("TELEFONE2", String(20))
    telefone3 = Column("TELEFONE3", String(20))
    celular = Column("CELULAR", String(20))
    outro = Column("OUTRO", String(100))
    observacao = Column("OBSERVACAO", TEXT)

# 3. Modelo de Tabela para Clientes
class Cliente(Base):
    __tablename__ = "TB_CLIENTE"
    id_cliente = Column("ID_CLIENTE", Integer, primary_key=True, autoincrement=True)
    data_cadastro = Column("DATA_CADASTRO", DateTime, nullable=False, default=datetime.now)
    sexo = Column("SEXO", String(2))
    nome = Column("NOME", String(100), nullable=False, index=True)
    sobrenome = Column("SOBRENOME", String(100))
    data_nascimento = Column("DATA_NASCIMENTO", DateTime)
    cpf = Column("CPF", String(11), unique=True, nullable=False, index=True)
    profissao = Column("PROFISSAO", String(100))
    estado_civil = Column("ESTADO_CIVIL", String(50))

    # Chaves Estrangeiras
    tb_endereco_id_endereco = Column("TB_ENDERECO_ID_ENDERECO", Integer, ForeignKey("TB_ENDERECO.ID_ENDERECO"))
    tb_contato_id_contato = Column("TB_CONTATO_ID_CONTATO", Integer, ForeignKey("TB_CONTATO.ID_CONTATO"))

    # Relacionamentos
    endereco = relationship("Endereco")
    contato = relationship("Contato")
    # Apagar o cliente apaga as suas associações com veículos
    veiculos_associados = relationship("ClienteVeiculo", back_populates="cliente", cascade="all, delete-orphan")

# 4. Modelo de Tabela para Veículos
class Veiculo(Base):
    __tablename__ = "TB_VEICULO"
    id_veiculo = Column("ID_VEICULO", Integer, primary_key=True, autoincrement=True)
    placa = Column("PLACA", String(10), unique=True, nullable=False, index=True)
    renavam = Column("RENAVAM", String(11))
    chassi = Column("CHASSI", String(17))
    fabricante = Column("FABRICANTE", String(100))
    modelo = Column("MODELO", String(100), nullable=False)
    motor = Column("MOTOR", String(50))
    ano = Column("ANO", Integer)
    combustivel = Column("COMBUSTIVEL", String(50))

    clientes_associados = relationship("ClienteVeiculo", back_populates="veiculo", cascade="all, delete-orphan")

# 5. Tabela de ligação Cliente <-> Veículo (muitos-para-muitos)
class ClienteVeiculo(Base):
    """
    Tabela de ligação "TB_CLIENTEVEICULO".
    A chave primária é composta pelo ID do Cliente e pelo ID do Veículo,
    então o mesmo par não pode ser associado duas vezes.
    """
    __tablename__ = "TB_CLIENTEVEICULO"
    tb_cliente_id_cliente = Column(
        "TB_CLIENTE_ID_CLIENTE",
        Integer,
        ForeignKey("TB_CLIENTE.ID_CLIENTE", ondelete="CASCADE"),
        primary_key=True,
        autoincrement=False,
        nullable=False,
    )
    tb_veiculo_id_veiculo = Column(
        "TB_VEICULO_ID_VEICULO",
        Integer,
        ForeignKey("TB_VEICULO.ID_VEICULO", ondelete="CASCADE"),
        primary_key=True,
        autoincrement=False,
        nullable=False,
    )

    # Propriedades de navegação (preenchidas pelo SQLAlchemy quando carregadas)
    cliente = relationship("Cliente", back_populates="veiculos_associados")
    veiculo = relationship("Veiculo", back_populates="clientes_associados")

    @validates("tb_cliente_id_cliente", "tb_veiculo_id_veiculo")
    def validate_ids(self, key, value):
        if value is None:
            raise ValueError(f"{key} é obrigatório")
        return value
