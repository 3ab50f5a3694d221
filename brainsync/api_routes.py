# brainsync/api_routes.py
from flask import Blueprint, current_app, g, jsonify, request
import logging

from .auth import assign_role, instructor_required, token_required, verify_identity_token, bearer_token
from .database import get_store
from .errors import AuthError, BrainSyncError
from .models import prepare_create_fields
from .storage import process_video_upload, storage_configured, with_playable_url

logger = logging.getLogger(__name__)

api_bp = Blueprint('api', __name__)


@api_bp.errorhandler(BrainSyncError)
def handle_brainsync_error(error):
    return jsonify(error.to_dict()), error.status


@api_bp.route('/health', methods=['GET'])
def health_check():
    """Liveness"""
    return jsonify({'message': 'BrainSync API is running!'}), 200


@api_bp.route('/health/ready', methods=['GET'])
def readiness_check():
    """Store and object storage status"""
    try:
        firestore_status = 'healthy' if get_store().ping() else 'unhealthy'
    except Exception as e:
        logger.error(f"Store unavailable: {e}")
        firestore_status = 'unhealthy'
    storage_status = 'configured' if storage_configured() else 'not_configured'

    return jsonify({
        'status': firestore_status,
        'services': {
            'firestore': firestore_status,
            'storage': storage_status
        }
    }), 200 if firestore_status == 'healthy' else 503


@api_bp.route('/videos', methods=['GET'])
def get_all_videos():
    """All videos, newest first"""
    videos = get_store().list_all()
    return jsonify([with_playable_url(video) for video in videos]), 200


@api_bp.route('/videos/category/<path:category>', methods=['GET'])
def get_videos_by_category(category):
    videos = get_store().list_by_category(category)
    return jsonify([with_playable_url(video) for video in videos]), 200


@api_bp.route('/videos/<video_id>', methods=['GET'])
def get_video_by_id(video_id):
    video = get_store().get_by_id(video_id)
    return jsonify(with_playable_url(video)), 200


@api_bp.route('/videos', methods=['POST'])
@instructor_required
def create_video():
    data = request.get_json(silent=True)
    fields = prepare_create_fields(data, strict=current_app.config['STRICT_CREATE'])

    identity = g.get('identity')
    if current_app.config['REQUIRE_AUTH'] and identity:
        # Ownership comes from the verified token, not the body
        fields['instructorId'] = identity.uid
        if identity.email:
            fields['instructor'] = identity.email.split('@')[0]

    video = get_store().create(fields)
    return jsonify(with_playable_url(video)), 201


@api_bp.route('/videos/<video_id>', methods=['DELETE'])
@instructor_required
def delete_video(video_id):
    store = get_store()
    if current_app.config['REQUIRE_AUTH']:
        video = store.get_by_id(video_id)
        if video.get('instructorId') != g.identity.uid:
            raise AuthError('Only the owning instructor can delete this video', status=403)

    store.delete_by_id(video_id)
    return jsonify({'message': 'Video deleted successfully'}), 200


@api_bp.route('/videos/upload', methods=['POST'])
@instructor_required
def upload_video_file():
    """Video file upload; the returned videoUrl and videoKey go into the create body"""
    result = process_video_upload(request.files.get('file'))
    return jsonify(result), 201


@api_bp.route('/auth/me', methods=['GET'])
@token_required
def current_identity():
    identity = g.get('identity')
    if identity is None:
        raise AuthError()
    return jsonify(identity._asdict()), 200


@api_bp.route('/auth/role', methods=['POST'])
def set_role():
    """Role assignment at sign-up, stored as a signed token claim"""
    identity = verify_identity_token(bearer_token())
    data = request.get_json(silent=True) or {}
    result = assign_role(identity, data.get('role'))
    return jsonify(result), 200

