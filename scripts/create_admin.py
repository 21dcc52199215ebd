# create_admin.py
# Uso: python scripts/create_admin.py <usuario> <senha>
# Cria ou redefine a senha de um usuário administrador.

import sys

from sqlmodel import Session, SQLModel, select

from apontt.db.session import engine
from apontt.models.user import User
from apontt.utils.security import get_password_hash

if len(sys.argv) < 3:
    raise SystemExit("Uso: python scripts/create_admin.py <usuario> <senha>")

username, password = sys.argv[1], sys.argv[2]
if len(password) < 6:
    raise SystemExit("A senha deve ter pelo menos 6 caracteres.")

SQLModel.metadata.create_all(bind=engine)
with Session(engine) as session:
    user = session.exec(select(User).where(User.username == username)).first()
    if user:
        user.password_hash = get_password_hash(password)
        print(f"Senha do usuário '{username}' redefinida.")
    else:
        user = User(username=username, password_hash=get_password_hash(password))
        print(f"Usuário '{username}' criado.")
    session.add(user)
    session.commit()
