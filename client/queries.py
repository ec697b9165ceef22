"""
GraphQL operation templates used by the dashboards.

Field names here must follow the server schema by hand; nothing generates
them. ``INVALIDATION_RULES`` maps a mutation's root field to the query
templates whose cached results it makes stale.
"""

USER_FIELDS = """
    id
    name
    email
    role
    createdAt
    updatedAt
"""

PROJECT_FIELDS = """
    id
    title
    description
    category
    startDate
    endDate
    status
    progress
    createdBy { id user { id name } }
    studentsWorkingOn { id universityId user { id name } }
    tasks { id title status }
    createdAt
    updatedAt
"""

TASK_FIELDS = """
    id
    title
    description
    dueDate
    status
    project { id title }
    createdBy { id user { id name } }
    studentsWorkingOn { id universityId user { id name } }
    createdAt
    updatedAt
"""

MESSAGE_FIELDS = """
    id
    content
    sender { id role }
    receiver { id role }
    timestamp
    read
"""

# -------------------- Users -------------------- #

GET_USERS_QUERY = f"""
query GetUsers {{
  users {{ {USER_FIELDS} }}
}}
"""

GET_USER_QUERY = f"""
query GetUser($id: ID!) {{
  user(id: $id) {{ {USER_FIELDS} }}
}}
"""

GET_ME_QUERY = f"""
query Me {{
  me {{ {USER_FIELDS} }}
}}
"""

CREATE_USER_MUTATION = f"""
mutation AddUser($input: UserInput!) {{
  addUser(input: $input) {{ {USER_FIELDS} }}
}}
"""

UPDATE_USER_MUTATION = f"""
mutation UpdateUser($id: ID!, $input: UserUpdateInput!) {{
  updateUser(id: $id, input: $input) {{ {USER_FIELDS} }}
}}
"""

DELETE_USER_MUTATION = """
mutation DeleteUser($id: ID!) {
  deleteUser(id: $id) { id }
}
"""

LOGIN_MUTATION = f"""
mutation Login($input: LoginInput!) {{
  login(input: $input) {{ token user {{ {USER_FIELDS} }} }}
}}
"""

LOGOUT_MUTATION = """
mutation Logout {
  logout
}
"""

# -------------------- Admins -------------------- #

ADMIN_FIELDS = """
    id
    userId
    permissions
    user { id name email }
"""

GET_ADMINS_QUERY = f"""
query GetAdmins {{
  admins {{ {ADMIN_FIELDS} }}
}}
"""

GET_ADMIN_QUERY = f"""
query GetAdmin($id: ID!) {{
  admin(id: $id) {{ {ADMIN_FIELDS} }}
}}
"""

GET_ADMIN_BY_USER_QUERY = f"""
query GetAdminByUserId($userId: ID!) {{
  adminByUserId(userId: $userId) {{ {ADMIN_FIELDS} }}
}}
"""

CREATE_ADMIN_MUTATION = f"""
mutation AddAdmin($input: AdminInput!) {{
  addAdmin(input: $input) {{ {ADMIN_FIELDS} }}
}}
"""

UPDATE_ADMIN_MUTATION = f"""
mutation UpdateAdmin($id: ID!, $input: AdminUpdateInput!) {{
  updateAdmin(id: $id, input: $input) {{ {ADMIN_FIELDS} }}
}}
"""

DELETE_ADMIN_MUTATION = """
mutation DeleteAdmin($id: ID!) {
  deleteAdmin(id: $id) { id }
}
"""

# -------------------- Students -------------------- #

STUDENT_FIELDS = """
    id
    userId
    universityId
    major
    year
    user { id name email }
"""

GET_STUDENTS_QUERY = f"""
query GetStudents {{
  students {{ {STUDENT_FIELDS} }}
}}
"""

GET_STUDENT_QUERY = f"""
query GetStudent($id: ID!) {{
  student(id: $id) {{ {STUDENT_FIELDS} }}
}}
"""

GET_STUDENT_BY_USER_QUERY = f"""
query GetStudentByUserId($userId: ID!) {{
  studentByUserId(userId: $userId) {{ {STUDENT_FIELDS} }}
}}
"""

CREATE_STUDENT_MUTATION = f"""
mutation AddStudent($input: StudentInput!) {{
  addStudent(input: $input) {{ {STUDENT_FIELDS} }}
}}
"""

UPDATE_STUDENT_MUTATION = f"""
mutation UpdateStudent($id: ID!, $input: StudentUpdateInput!) {{
  updateStudent(id: $id, input: $input) {{ {STUDENT_FIELDS} }}
}}
"""

DELETE_STUDENT_MUTATION = """
mutation DeleteStudent($id: ID!) {
  deleteStudent(id: $id) { id }
}
"""

# -------------------- Projects -------------------- #

GET_PROJECTS_QUERY = f"""
query GetProjects {{
  projects {{ {PROJECT_FIELDS} }}
}}
"""

GET_PROJECT_QUERY = f"""
query GetProject($id: ID!) {{
  project(id: $id) {{ {PROJECT_FIELDS} }}
}}
"""

GET_PROJECTS_BY_ADMIN_QUERY = f"""
query GetProjectsByAdmin($adminId: ID!) {{
  projectsByAdmin(adminId: $adminId) {{ {PROJECT_FIELDS} }}
}}
"""

GET_PROJECTS_BY_STUDENT_QUERY = f"""
query GetProjectsByStudent($studentId: ID!) {{
  projectsByStudent(studentId: $studentId) {{ {PROJECT_FIELDS} }}
}}
"""

CREATE_PROJECT_MUTATION = f"""
mutation AddProject($input: ProjectInput!) {{
  addProject(input: $input) {{ {PROJECT_FIELDS} }}
}}
"""

UPDATE_PROJECT_MUTATION = f"""
mutation UpdateProject($id: ID!, $input: ProjectUpdateInput!) {{
  updateProject(id: $id, input: $input) {{ {PROJECT_FIELDS} }}
}}
"""

DELETE_PROJECT_MUTATION = """
mutation DeleteProject($id: ID!) {
  deleteProject(id: $id) { id title }
}
"""

# -------------------- Tasks -------------------- #

GET_TASKS_QUERY = f"""
query GetTasks {{
  tasks {{ {TASK_FIELDS} }}
}}
"""

GET_TASK_QUERY = f"""
query GetTask($id: ID!) {{
  task(id: $id) {{ {TASK_FIELDS} }}
}}
"""

GET_TASKS_BY_PROJECT_QUERY = f"""
query GetTasksByProject($projectId: ID!) {{
  tasksByProject(projectId: $projectId) {{ {TASK_FIELDS} }}
}}
"""

GET_TASKS_BY_STUDENT_QUERY = f"""
query GetTasksByStudent($studentId: ID!) {{
  tasksByStudent(studentId: $studentId) {{ {TASK_FIELDS} }}
}}
"""

GET_RECENT_TASKS_QUERY = f"""
query GetRecentTasks($limit: Int) {{
  recentTasks(limit: $limit) {{ {TASK_FIELDS} }}
}}
"""

CREATE_TASK_MUTATION = f"""
mutation AddTask($input: TaskInput!) {{
  addTask(input: $input) {{ {TASK_FIELDS} }}
}}
"""

UPDATE_TASK_MUTATION = f"""
mutation UpdateTask($id: ID!, $input: TaskUpdateInput!) {{
  updateTask(id: $id, input: $input) {{ {TASK_FIELDS} }}
}}
"""

DELETE_TASK_MUTATION = """
mutation DeleteTask($id: ID!) {
  deleteTask(id: $id) { id title }
}
"""

# -------------------- Messages -------------------- #

GET_MESSAGES_QUERY = f"""
query GetMessages {{
  messages {{ {MESSAGE_FIELDS} }}
}}
"""

GET_MESSAGE_QUERY = f"""
query GetMessage($id: ID!) {{
  message(id: $id) {{ {MESSAGE_FIELDS} }}
}}
"""

GET_MESSAGES_BETWEEN_USERS_QUERY = f"""
query GetMessagesBetweenUsers($userId: ID!) {{
  messagesBetweenUsers(userId: $userId) {{ {MESSAGE_FIELDS} }}
}}
"""

CREATE_MESSAGE_MUTATION = f"""
mutation CreateMessage($input: MessageInput!) {{
  createMessage(input: $input) {{ {MESSAGE_FIELDS} }}
}}
"""

MARK_MESSAGE_AS_READ_MUTATION = f"""
mutation MarkMessageAsRead($id: ID!) {{
  markMessageAsRead(id: $id) {{ {MESSAGE_FIELDS} }}
}}
"""

MARK_ALL_MESSAGES_AS_READ_MUTATION = """
mutation MarkAllMessagesAsRead($senderId: ID!) {
  markAllMessagesAsRead(senderId: $senderId)
}
"""

DELETE_MESSAGE_MUTATION = """
mutation DeleteMessage($id: ID!) {
  deleteMessage(id: $id) { id }
}
"""

# -------------------- Invalidation -------------------- #

_USER_READS = (GET_USERS_QUERY, GET_USER_QUERY, GET_ME_QUERY)
_ADMIN_READS = (GET_ADMINS_QUERY, GET_ADMIN_QUERY, GET_ADMIN_BY_USER_QUERY)
_STUDENT_READS = (GET_STUDENTS_QUERY, GET_STUDENT_QUERY, GET_STUDENT_BY_USER_QUERY)
_PROJECT_READS = (
    GET_PROJECTS_QUERY, GET_PROJECT_QUERY,
    GET_PROJECTS_BY_ADMIN_QUERY, GET_PROJECTS_BY_STUDENT_QUERY,
)
_TASK_READS = (
    GET_TASKS_QUERY, GET_TASK_QUERY, GET_TASKS_BY_PROJECT_QUERY,
    GET_TASKS_BY_STUDENT_QUERY, GET_RECENT_TASKS_QUERY,
)
_MESSAGE_READS = (GET_MESSAGES_QUERY, GET_MESSAGE_QUERY, GET_MESSAGES_BETWEEN_USERS_QUERY)

# Admin/student lists embed user names, project lists embed tasks and
# people, task lists embed projects.
INVALIDATION_RULES = {
    "addUser": _USER_READS,
    "updateUser": _USER_READS + _ADMIN_READS + _STUDENT_READS,
    "deleteUser": _USER_READS + _ADMIN_READS + _STUDENT_READS,
    "addAdmin": _ADMIN_READS,
    "updateAdmin": _ADMIN_READS + _PROJECT_READS + _TASK_READS,
    "deleteAdmin": _ADMIN_READS + _PROJECT_READS + _TASK_READS,
    "addStudent": _STUDENT_READS,
    "updateStudent": _STUDENT_READS + _PROJECT_READS + _TASK_READS,
    "deleteStudent": _STUDENT_READS + _PROJECT_READS + _TASK_READS,
    "addProject": _PROJECT_READS + _TASK_READS + _ADMIN_READS + _STUDENT_READS,
    "updateProject": _PROJECT_READS + _TASK_READS + _ADMIN_READS + _STUDENT_READS,
    "deleteProject": _PROJECT_READS + _TASK_READS,
    "addTask": _TASK_READS + _PROJECT_READS + _ADMIN_READS + _STUDENT_READS,
    "updateTask": _TASK_READS + _PROJECT_READS + _ADMIN_READS + _STUDENT_READS,
    "deleteTask": _TASK_READS + _PROJECT_READS,
    "createMessage": _MESSAGE_READS,
    "markMessageAsRead": _MESSAGE_READS,
    "markAllMessagesAsRead": _MESSAGE_READS,
    "deleteMessage": _MESSAGE_READS,
    "login": (GET_ME_QUERY,),
    "logout": (GET_ME_QUERY,),
}
