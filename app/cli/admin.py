import click
from app.core.database import database
from app.core.exceptions import AppException
from app.models.user import UserRole
from app.services.payment_service import PaymentService
from app.services.user_service import UserService
import logging

logger = logging.getLogger(__name__)


def _open_session():
    try:
        return database.session()
    except AppException as e:
        click.echo(f"❌ {e.message}", err=True)
        return None


def _find_user(db, email, user_id):
    if not email and user_id is None:
        click.echo("❌ Please provide --email or --id for this operation", err=True)
        return None
    try:
        return UserService().get_user(db, user_id=user_id, email=email)
    except AppException as e:
        click.echo(f"❌ {e.message}", err=True)
        return None


@click.group()
def cli():
    """PostPlanner CLI commands"""
    pass


@cli.command()
@click.option('--email', required=False, help='User email')
@click.option('--id', 'user_id', type=int, required=False, help='User id')
@click.option('--set-admin', 'set_admin', is_flag=True, help='Grant the admin role')
@click.option('--remove-admin', 'remove_admin', is_flag=True, help='Revoke the admin role')
def role(email, user_id, set_admin, remove_admin):
    """Show or change the role of a user"""
    db = _open_session()
    if db is None:
        return
    try:
        user = _find_user(db, email, user_id)
        if not user:
            return

        display_ident = user.email or user.open_id
        if set_admin:
            if user.is_admin:
                click.echo(f"✓ User {display_ident} is already an admin")
            else:
                UserService().set_role(db, user, UserRole.ADMIN)
                click.echo(f"✓ Granted admin role to {display_ident}")
        elif remove_admin:
            if not user.is_admin:
                click.echo(f"✓ User {display_ident} is not an admin")
            else:
                UserService().set_role(db, user, UserRole.USER)
                click.echo(f"✓ Revoked admin role from {display_ident}")
        else:
            click.echo(f"User {display_ident} has role {user.role.value}")
    except Exception as e:
        db.rollback()
        logger.error(f"CLI error: {e}")
        click.echo(f"❌ Error: {e}", err=True)
    finally:
        db.close()


@cli.command()
@click.option('--as-admin', 'admin_id', type=int, required=True, help='Id of the admin running the command')
def pending(admin_id):
    """List pending payment requests"""
    db = _open_session()
    if db is None:
        return
    try:
        admin = _find_user(db, None, admin_id)
        if not admin:
            return

        payments = PaymentService().list_pending(db, admin)
        if not payments:
            click.echo("No pending payment requests")
            return

        click.echo(f"\nFound {len(payments)} pending payment requests:\n")
        for p in payments:
            proof = p.payment_proof or '<no proof>'
            click.echo(
                f"  - #{p.id} user {p.user_id}: {p.plan.value} {p.amount} {p.currency}, "
                f"requested {p.requested_at.isoformat()}, proof: {proof}"
            )
    except AppException as e:
        click.echo(f"❌ {e.message}", err=True)
    except Exception as e:
        db.rollback()
        logger.error(f"CLI error: {e}")
        click.echo(f"❌ Error: {e}", err=True)
    finally:
        db.close()


@cli.command()
@click.argument('payment_id', type=int)
@click.option('--approve/--reject', 'approved', required=True, help='Approve or reject the request')
@click.option('--as-admin', 'admin_id', type=int, required=True, help='Id of the admin running the command')
@click.option('-y', '--yes', 'confirm', is_flag=True, help='Skip confirmation')
def decide(payment_id, approved, admin_id, confirm):
    """Approve or reject a pending payment request"""
    db = _open_session()
    if db is None:
        return
    try:
        admin = _find_user(db, None, admin_id)
        if not admin:
            return

        verb = "approve" if approved else "reject"
        if not confirm:
            try:
                if not click.confirm(f"Are you sure you want to {verb} payment request #{payment_id}?", default=False):
                    click.echo("Aborted")
                    return
            except click.exceptions.Abort:
                click.echo("\nAborted")
                return

        payment = PaymentService().admin_decide(db, admin, payment_id, approved)
        click.echo(f"✓ Payment request #{payment.id} is now {payment.status.value}")
    except AppException as e:
        click.echo(f"❌ {e.message}", err=True)
    except Exception as e:
        db.rollback()
        logger.error(f"CLI error: {e}")
        click.echo(f"❌ Error: {e}", err=True)
    finally:
        db.close()


if __name__ == '__main__':
    cli()
