from rest_framework import serializers

from . import domain


class TeamMemberSerializer(serializers.Serializer):
    user_id = serializers.CharField(max_length=50)
    username = serializers.CharField(max_length=100)
    is_active = serializers.BooleanField()


class TeamSerializer(serializers.Serializer):
    team_name = serializers.CharField(source='name', max_length=100)
    members = TeamMemberSerializer(many=True)

    def create(self, validated_data):
        return domain.Team(
            name=validated_data['name'],
            members=[domain.TeamMember(**member) for member in validated_data['members']],
        )


class UserSerializer(serializers.Serializer):
    user_id = serializers.CharField()
    username = serializers.CharField()
    team_name = serializers.CharField(allow_null=True)
    is_active = serializers.BooleanField()


class PullRequestSerializer(serializers.Serializer):
    pull_request_id = serializers.CharField(source='id')
    pull_request_name = serializers.CharField(source='name')
    author_id = serializers.CharField()
    status = serializers.CharField()
    assigned_reviewers = serializers.ListField(source='reviewers', child=serializers.CharField())
    createdAt = serializers.DateTimeField(source='created_at', format='%Y-%m-%dT%H:%M:%SZ', allow_null=True)
    mergedAt = serializers.DateTimeField(source='merged_at', format='%Y-%m-%dT%H:%M:%SZ', allow_null=True)


class PullRequestShortSerializer(serializers.Serializer):
    pull_request_id = serializers.CharField(source='id')
    pull_request_name = serializers.CharField(source='name')
    author_id = serializers.CharField()
    status = serializers.CharField()


class UserReviewsSerializer(serializers.Serializer):
    user_id = serializers.CharField()
    pull_requests = PullRequestShortSerializer(many=True)


# Тела запросов

class SetIsActiveRequestSerializer(serializers.Serializer):
    user_id = serializers.CharField()
    is_active = serializers.BooleanField()


class CreatePullRequestRequestSerializer(serializers.Serializer):
    pull_request_id = serializers.CharField(max_length=100)
    pull_request_name = serializers.CharField(max_length=200)
    author_id = serializers.CharField()


class MergePullRequestRequestSerializer(serializers.Serializer):
    pull_request_id = serializers.CharField()


class ReassignRequestSerializer(serializers.Serializer):
    pull_request_id = serializers.CharField()
    old_user_id = serializers.CharField()
