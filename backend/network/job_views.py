"""
Job postings and applications.
"""
import logging

from django.db import IntegrityError, transaction
from django.db.models import F, Q
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from network.exceptions import Conflict
from network.feed import paginate, parse_pagination
from network.models import Job, JobApplication
from network.notifications import notify
from network.permissions import is_owner_or_admin
from network.serializers import (
    ApplicationStatusSerializer,
    JobApplicationSerializer,
    JobSerializer,
    UserSummarySerializer,
)

logger = logging.getLogger(__name__)


def _truthy(value):
    return str(value).lower() in ('1', 'true', 'yes')


def _filtered_jobs(params):
    """Active jobs narrowed by the listing query parameters."""
    qs = Job.objects.filter(is_active=True).select_related('poster__profile')

    search = (params.get('search') or '').strip()
    if search:
        for term in search.split():
            qs = qs.filter(
                Q(title__icontains=term)
                | Q(company__icontains=term)
                | Q(description__icontains=term)
                | Q(skills__icontains=term)
            )

    location = (params.get('location') or '').strip()
    if location:
        qs = qs.filter(location__icontains=location)

    job_type = params.get('type')
    if job_type:
        qs = qs.filter(job_type=job_type)

    experience = params.get('experience')
    if experience:
        qs = qs.filter(experience=experience)

    skills = [s.strip() for s in (params.get('skills') or '').split(',') if s.strip()]
    if skills:
        match = Q()
        for skill in skills:
            match |= Q(skills__icontains=skill)
        qs = qs.filter(match)

    if _truthy(params.get('remote', '')):
        qs = qs.filter(remote=True)
    if _truthy(params.get('featured', '')):
        qs = qs.filter(featured=True)

    return qs.order_by('-featured', '-created_at', '-id')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def jobs_list_create(request):
    """
    GET: List active jobs, featured first then newest.
         Filters: search, location, type, experience, skills, remote, featured.
    POST: Publish a job; the caller becomes its poster.
    """
    if request.method == 'GET':
        page, limit = parse_pagination(request)
        jobs, meta = paginate(_filtered_jobs(request.query_params), page, limit)
        return Response({'jobs': JobSerializer(jobs, many=True).data, **meta})

    serializer = JobSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    job = serializer.save(poster=request.user)
    logger.info("Job %s posted by %s", job.pk, request.user.pk)
    return Response(
        {'message': 'Job posted successfully', 'job': JobSerializer(job).data},
        status=status.HTTP_201_CREATED,
    )


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def job_detail(request, job_id):
    """
    GET: Fetch a job. Views by anyone but the poster are counted.
    PUT/PATCH: Update a job (poster or admin)
    DELETE: Delete a job (poster or admin)
    """
    job = get_object_or_404(Job.objects.select_related('poster__profile'), pk=job_id)

    if request.method == 'GET':
        if job.poster_id != request.user.pk:
            Job.objects.filter(pk=job.pk).update(views=F('views') + 1)
            job.refresh_from_db(fields=['views'])

        data = JobSerializer(job).data
        data['has_applied'] = job.applications.filter(applicant=request.user).exists()
        if is_owner_or_admin(request.user, job.poster_id):
            applications = job.applications.select_related('applicant__profile')
            data['applications'] = JobApplicationSerializer(applications, many=True).data
        return Response({'job': data})

    if not is_owner_or_admin(request.user, job.poster_id):
        raise PermissionDenied('Not authorized to modify this job.')

    if request.method == 'DELETE':
        job.delete()
        logger.info("Job %s deleted by %s", job_id, request.user.pk)
        return Response({'message': 'Job deleted successfully'})

    serializer = JobSerializer(job, data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)
    job = serializer.save()
    return Response({'message': 'Job updated successfully', 'job': JobSerializer(job).data})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def apply_to_job(request, job_id):
    """
    Apply to an active job.

    Request Body:
    {
        "cover_letter": "...",
        "resume_url": "https://..."
    }

    Rejected without any change when the job is inactive, past its deadline,
    or the caller already applied.
    """
    job = get_object_or_404(Job, pk=job_id)
    if not job.is_active:
        raise Conflict('Job posting is no longer active.')
    if not job.is_accepting_applications():
        raise Conflict('The application deadline for this job has passed.')
    if JobApplication.objects.filter(job=job, applicant=request.user).exists():
        raise Conflict('You have already applied to this job.')

    serializer = JobApplicationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        with transaction.atomic():
            application = serializer.save(job=job, applicant=request.user)
            notify(job.poster, request.user, 'job_match', job=job, related_user=request.user)
    except IntegrityError:
        raise Conflict('You have already applied to this job.')

    logger.info("Account %s applied to job %s", request.user.pk, job.pk)
    return Response(
        {
            'message': 'Application submitted successfully',
            'application': JobApplicationSerializer(application).data,
        },
        status=status.HTTP_201_CREATED,
    )


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def job_applications(request, job_id):
    """Applications for a job, visible to its poster only."""
    job = get_object_or_404(Job, pk=job_id)
    if job.poster_id != request.user.pk:
        raise PermissionDenied('Not authorized to view applications.')

    applications = job.applications.select_related('applicant__profile').order_by('-applied_at', '-id')
    return Response(
        {
            'applications': JobApplicationSerializer(applications, many=True).data,
            'job_title': job.title,
        }
    )


@api_view(['PUT', 'PATCH'])
@permission_classes([IsAuthenticated])
def update_application_status(request, job_id, application_id):
    """Move an application to any valid status. No transition order is enforced."""
    serializer = ApplicationStatusSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    job = get_object_or_404(Job, pk=job_id)
    if job.poster_id != request.user.pk:
        raise PermissionDenied('Not authorized to update this application.')
    application = get_object_or_404(
        JobApplication.objects.select_related('applicant__profile'), pk=application_id, job=job
    )

    application.status = serializer.validated_data['status']
    application.save(update_fields=['status', 'updated_at'])
    return Response(
        {
            'message': 'Application status updated',
            'application': JobApplicationSerializer(application).data,
        }
    )


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_applications(request):
    """The caller's applications with a summary of each job, newest first."""
    page, limit = parse_pagination(request)
    qs = (
        JobApplication.objects.filter(applicant=request.user)
        .select_related('job__poster__profile', 'applicant__profile')
        .order_by('-applied_at', '-id')
    )
    applications, meta = paginate(qs, page, limit)

    results = []
    for application in applications:
        job = application.job
        results.append({
            'job': {
                'id': job.pk,
                'title': job.title,
                'company': job.company,
                'location': job.location,
                'job_type': job.job_type,
                'is_active': job.is_active,
                'poster': UserSummarySerializer(job.poster).data,
            },
            'application': JobApplicationSerializer(application).data,
        })
    return Response({'applications': results, **meta})
